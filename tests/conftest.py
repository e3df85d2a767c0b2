"""Shared pytest fixtures for memcache discovery tests."""

import asyncio
from typing import List, Optional

import pytest
import pytest_asyncio
from unittest.mock import AsyncMock, Mock

from memcache_discovery.config import DiscoveryConfig
from memcache_discovery.network.address import Address


VERSION_LINE = b"2\n"
NODES_LINE = b"node1|10.0.0.1|11211 node2|10.0.0.2|11211\n"
VALID_RESPONSE = b"CONFIG cluster 0 44\n" + VERSION_LINE + NODES_LINE


class FakeConfigServer:
    """Loopback configuration endpoint answering one canned response.

    Each client gets ``response`` after its request line. With
    ``respond=False`` nothing is sent back; with ``close_after_write`` the
    server hangs up right after writing instead of waiting for the client.
    """

    def __init__(
        self,
        response: bytes = VALID_RESPONSE,
        respond: bool = True,
        close_after_write: bool = False,
    ):
        self.response = response
        self.respond = respond
        self.close_after_write = close_after_write
        self.requests: List[bytes] = []
        self.request_received = asyncio.Event()
        self.client_disconnected = asyncio.Event()
        self._server: Optional[asyncio.AbstractServer] = None
        self._writers: List[asyncio.StreamWriter] = []

    @property
    def address(self) -> str:
        host, port = self._server.sockets[0].getsockname()[:2]
        return f"{host}:{port}"

    async def start(self) -> "FakeConfigServer":
        self._server = await asyncio.start_server(self._handle, "127.0.0.1", 0)
        return self

    async def stop(self) -> None:
        for writer in self._writers:
            writer.close()
        self._server.close()
        await self._server.wait_closed()

    async def _handle(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        self._writers.append(writer)
        try:
            self.requests.append(await reader.readline())
            self.request_received.set()
            if self.respond:
                writer.write(self.response)
                await writer.drain()
            if not self.close_after_write:
                # Returns once the client closes its side.
                await reader.read()
                self.client_disconnected.set()
        except ConnectionError:
            self.client_disconnected.set()
        finally:
            writer.close()


@pytest_asyncio.fixture
async def config_server():
    """Factory starting FakeConfigServer instances, stopped after the test."""
    servers: List[FakeConfigServer] = []

    async def start(**kwargs) -> FakeConfigServer:
        server = await FakeConfigServer(**kwargs).start()
        servers.append(server)
        return server

    yield start

    for server in servers:
        await server.stop()


@pytest.fixture
def make_response():
    """Build a response whose header declares the given or the true size."""

    def build(version_line: bytes, nodes_line: bytes, size: Optional[int] = None) -> bytes:
        if size is None:
            size = len(version_line) + len(nodes_line)
        return f"CONFIG cluster 0 {size}\n".encode() + version_line + nodes_line

    return build


@pytest.fixture
def valid_response():
    return VALID_RESPONSE


@pytest.fixture
def address():
    """Create an Address."""
    return Address("127.0.0.1", 11211)


@pytest.fixture
def discovery_config():
    """Create a DiscoveryConfig with all options set."""
    return DiscoveryConfig(
        endpoint="cfg.example.com:11211",
        dial_timeout=2.0,
        operation_timeout=10.0,
    )


@pytest.fixture
def mock_stream():
    """Create a connected (reader, writer) pair of mocks."""
    reader = Mock()
    reader.readuntil = AsyncMock()
    reader.readexactly = AsyncMock()
    writer = Mock()
    writer.drain = AsyncMock()
    writer.wait_closed = AsyncMock()
    sock = Mock()
    sock.getpeername.return_value = ("127.0.0.1", 11211)
    sock.getsockname.return_value = ("127.0.0.1", 54321)
    writer.get_extra_info.return_value = sock
    return reader, writer
