"""Async socket connection to a configuration endpoint."""

import asyncio
from enum import Enum
from typing import Optional

from memcache_discovery.exceptions import (
    ConnectionTimeoutException,
    FramingException,
    IllegalStateException,
    TransportException,
)
from memcache_discovery.logging import get_logger
from memcache_discovery.network.address import Address

_logger = get_logger("connection")

LINE_TERMINATOR = b"\n"


class ConnectionState(Enum):
    """Connection lifecycle states."""

    CREATED = "CREATED"
    CONNECTING = "CONNECTING"
    CONNECTED = "CONNECTED"
    CLOSED = "CLOSED"


class ConfigConnection:
    """A single-use TCP session with a configuration endpoint.

    The connection is opened with a bounded dial timeout, carries one
    request and exposes a buffered line reader over the response. Used as
    an async context manager it is closed on every exit path.

    Example:
        >>> async with ConfigConnection(Address("cfg.local", 11211)) as conn:
        ...     await conn.send_request(b"config get cluster\\n")
        ...     header = await conn.readline()
    """

    READ_LIMIT = 64 * 1024
    MAX_LINE_LENGTH = 16 * 1024 * 1024

    def __init__(self, address: Address, connection_timeout: float = 5.0):
        self._address = address
        self._connection_timeout = connection_timeout

        self._state = ConnectionState.CREATED
        self._reader: Optional[asyncio.StreamReader] = None
        self._writer: Optional[asyncio.StreamWriter] = None
        self._remote_address: Optional[tuple] = None
        self._local_address: Optional[tuple] = None

    @property
    def address(self) -> Address:
        return self._address

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def is_alive(self) -> bool:
        return self._state == ConnectionState.CONNECTED

    @property
    def remote_address(self) -> Optional[tuple]:
        return self._remote_address

    @property
    def local_address(self) -> Optional[tuple]:
        return self._local_address

    async def connect(self) -> None:
        """Establish the connection within the dial timeout.

        Raises:
            IllegalStateException: If the connection was already used.
            ConnectionTimeoutException: If the dial timeout expires.
            TransportException: If the connection fails for any other reason.
        """
        if self._state != ConnectionState.CREATED:
            raise IllegalStateException(
                f"Cannot connect: connection is in state {self._state.value}"
            )

        self._state = ConnectionState.CONNECTING
        _logger.debug("Connecting to %s", self._address)

        try:
            self._reader, self._writer = await asyncio.wait_for(
                asyncio.open_connection(
                    self._address.host,
                    self._address.port,
                    limit=self.READ_LIMIT,
                ),
                timeout=self._connection_timeout,
            )
        except asyncio.TimeoutError as e:
            self._state = ConnectionState.CLOSED
            _logger.debug(
                "Timeout after %.1fs connecting to %s",
                self._connection_timeout,
                self._address,
            )
            raise ConnectionTimeoutException(
                f"Connection timeout after {self._connection_timeout}s to {self._address}",
                cause=e,
            )
        except (OSError, UnicodeError) as e:
            # IDNA encoding of a bad hostname raises UnicodeError, not gaierror.
            self._state = ConnectionState.CLOSED
            _logger.debug("Failed to connect to %s: %s", self._address, e)
            raise TransportException(
                f"Failed to connect to {self._address}: {e}", cause=e
            )
        except BaseException:
            self._state = ConnectionState.CLOSED
            raise

        sock = self._writer.get_extra_info("socket")
        if sock is not None:
            self._remote_address = sock.getpeername()
            self._local_address = sock.getsockname()

        self._state = ConnectionState.CONNECTED
        _logger.debug(
            "Connected to %s (remote=%s, local=%s)",
            self._address,
            self._remote_address,
            self._local_address,
        )

    async def send_request(self, command: bytes) -> None:
        """Write a request line and flush it to the wire.

        Args:
            command: The raw request, including its line terminator.

        Raises:
            TransportException: If the connection is not alive or the
                write fails.
        """
        if not self.is_alive or self._writer is None:
            raise TransportException(f"Connection to {self._address} is not alive")

        try:
            self._writer.write(command)
            await self._writer.drain()
        except OSError as e:
            _logger.debug("Write to %s failed: %s", self._address, e)
            raise TransportException(
                f"Failed to send request to {self._address}: {e}", cause=e
            )
        _logger.debug("Sent %r to %s", command, self._address)

    async def readline(self) -> bytes:
        """Read one raw line from the response.

        Lines longer than the stream buffer are assembled from several
        reads, up to ``MAX_LINE_LENGTH`` bytes.

        Returns:
            The line including its newline, or whatever bytes were left
            if the peer closed the stream first.

        Raises:
            TransportException: If the read fails.
            FramingException: If the line exceeds ``MAX_LINE_LENGTH``.
        """
        if not self.is_alive or self._reader is None:
            raise TransportException(f"Connection to {self._address} is not alive")

        chunks = []
        length = 0
        try:
            while True:
                try:
                    chunk = await self._reader.readuntil(LINE_TERMINATOR)
                    done = True
                except asyncio.IncompleteReadError as e:
                    chunk = e.partial
                    done = True
                except asyncio.LimitOverrunError as e:
                    # Buffered bytes stay in the reader until taken out here.
                    chunk = await self._reader.readexactly(e.consumed)
                    done = False

                length += len(chunk)
                if length > self.MAX_LINE_LENGTH:
                    raise FramingException(
                        f"Response line from {self._address} exceeds "
                        f"{self.MAX_LINE_LENGTH} bytes"
                    )
                chunks.append(chunk)
                if done:
                    return b"".join(chunks)
        except OSError as e:
            raise TransportException(
                f"Failed to read from {self._address}: {e}", cause=e
            )

    async def close(self) -> None:
        """Close the connection. Calling it again is a no-op."""
        if self._state == ConnectionState.CLOSED:
            return

        _logger.debug("Closing connection to %s", self._address)
        self._state = ConnectionState.CLOSED

        if self._writer is not None:
            writer = self._writer
            self._writer = None
            writer.close()
            try:
                await writer.wait_closed()
            except OSError as e:
                _logger.debug("Error while closing %s: %s", self._address, e)

        self._reader = None

    async def __aenter__(self) -> "ConfigConnection":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def __str__(self) -> str:
        return f"ConfigConnection[address={self._address}, state={self._state.value}]"

    def __repr__(self) -> str:
        return self.__str__()
