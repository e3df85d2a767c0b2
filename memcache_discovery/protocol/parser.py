"""Parser for the memcached ``config get cluster`` response.

Response layout::

    CONFIG cluster 0 <payload-size>\\n
    <version>\\n
    <hostname>|<ip>|<port> <hostname>|<ip>|<port> ...\\n

- payload-size: decimal byte count of the raw version line plus the raw
  node line, terminators included
- version: decimal configuration version
- node entries are separated by single spaces, fields by ``|``

The parser is a state machine fed one raw line at a time and does no I/O
of its own. Any violation aborts the whole parse; a partially parsed
configuration is never returned.
"""

import re
from enum import Enum
from typing import List, Optional

from memcache_discovery.discovery.base import ClusterConfig, Node
from memcache_discovery.exceptions import (
    ConsistencyException,
    FramingException,
    IllegalStateException,
    NodeFormatException,
)
from memcache_discovery.logging import get_logger

_logger = get_logger("parser")

CONFIG_GET_CLUSTER = b"config get cluster\n"

LINE_TERMINATOR = b"\n"
HEADER_TOKEN_COUNT = 4
NODE_FIELD_COUNT = 3

_DECIMAL = re.compile(r"[0-9]+")


class ParserState(Enum):
    """Position of the parser within the response."""

    HEADER = "HEADER"
    VERSION = "VERSION"
    NODES = "NODES"
    DONE = "DONE"


def _decode(line: bytes, what: str) -> str:
    try:
        return line.decode("utf-8")
    except UnicodeDecodeError as e:
        raise FramingException(f"{what} is not valid UTF-8: {line!r}", cause=e)


def _parse_decimal(text: str) -> Optional[int]:
    if _DECIMAL.fullmatch(text) is None:
        return None
    return int(text)


class ClusterConfigParser:
    """Incremental parser for a single cluster configuration response.

    Feed raw lines, terminators included, in the order they were read.
    :meth:`feed_line` returns None until the node line completes the
    response, then returns the :class:`ClusterConfig`.

    Example:
        >>> parser = ClusterConfigParser()
        >>> parser.feed_line(b"CONFIG cluster 0 19\\n")
        >>> parser.feed_line(b"1\\n")
        >>> parser.feed_line(b"a|10.0.0.1|11211\\n")
        ClusterConfig(version=1, nodes=(Node(hostname='a', ...),))
    """

    def __init__(self):
        self._state = ParserState.HEADER
        self._payload_size = 0
        self._version_line = b""
        self._version = 0

    @property
    def state(self) -> ParserState:
        return self._state

    @property
    def expected_payload_size(self) -> int:
        """Payload size declared by the header, 0 before it is read."""
        return self._payload_size

    def feed_line(self, line: bytes) -> Optional[ClusterConfig]:
        """Consume the next raw response line.

        Args:
            line: The raw line as read, including the trailing newline.
                A line without a newline means the stream ended early.

        Returns:
            The cluster configuration once the node line is consumed,
            otherwise None.

        Raises:
            FramingException: If a line is missing or malformed.
            ConsistencyException: If the payload size does not match.
            NodeFormatException: If a node entry is malformed.
            IllegalStateException: If the parser already finished.
        """
        if self._state == ParserState.HEADER:
            self._read_header(line)
            self._state = ParserState.VERSION
            return None
        if self._state == ParserState.VERSION:
            self._read_version(line)
            self._state = ParserState.NODES
            return None
        if self._state == ParserState.NODES:
            config = self._read_nodes(line)
            self._state = ParserState.DONE
            return config
        raise IllegalStateException("Cluster config response already parsed")

    def _read_header(self, line: bytes) -> None:
        if not line.endswith(LINE_TERMINATOR):
            raise FramingException(f"Failed to read config metadata: {line!r}")

        meta = _decode(line, "Config metadata").strip()
        # CONFIG cluster 0 <payload-size>
        components = meta.split(" ")
        if len(components) != HEADER_TOKEN_COUNT:
            raise FramingException(
                f"Expected {HEADER_TOKEN_COUNT} components in config metadata, "
                f"received {len(components)}, meta: {meta}"
            )

        size = _parse_decimal(components[3])
        if size is None:
            raise FramingException(
                f"Failed to parse config size from metadata: {meta}"
            )
        self._payload_size = size

    def _read_version(self, line: bytes) -> None:
        if not line.endswith(LINE_TERMINATOR):
            raise FramingException(f"Failed to find config version: {line!r}")

        text = _decode(line, "Config version").strip()
        version = _parse_decimal(text)
        if version is None:
            raise FramingException(f"Failed to parse config version: {text!r}")
        self._version_line = line
        self._version = version

    def _read_nodes(self, line: bytes) -> ClusterConfig:
        if not line.endswith(LINE_TERMINATOR):
            raise FramingException(f"Failed to read nodes: {line!r}")

        actual = len(self._version_line) + len(line)
        if actual != self._payload_size:
            raise ConsistencyException(
                f"Expected {self._payload_size} bytes in config payload, "
                f"but got {actual} instead",
                expected=self._payload_size,
                actual=actual,
            )

        nodes: List[Node] = []
        for entry in _decode(line, "Node list").strip().split(" "):
            nodes.append(self._parse_node(entry))

        _logger.debug(
            "Parsed cluster config version %d with %d node(s)",
            self._version,
            len(nodes),
        )
        return ClusterConfig(version=self._version, nodes=tuple(nodes))

    @staticmethod
    def _parse_node(entry: str) -> Node:
        fields = entry.split("|")
        if len(fields) != NODE_FIELD_COUNT:
            raise NodeFormatException(
                f"Node not in expected hostname|ip|port format: {entry!r}",
                entry=entry,
            )

        hostname, ip, port_str = fields
        if not hostname or not ip:
            raise NodeFormatException(
                f"Node has an empty hostname or ip: {entry!r}",
                entry=entry,
            )

        port = _parse_decimal(port_str)
        if port is None:
            raise NodeFormatException(
                f"Failed to parse port {port_str!r} of node: {entry!r}",
                entry=entry,
            )
        return Node(hostname=hostname, ip=ip, port=port)


async def read_cluster_config(reader) -> ClusterConfig:
    """Read and parse a full response from an async line reader.

    Args:
        reader: Any object with an ``async readline()`` returning raw lines,
            such as a :class:`ConfigConnection` or ``asyncio.StreamReader``.

    Returns:
        The parsed cluster configuration.
    """
    parser = ClusterConfigParser()
    while True:
        config = parser.feed_line(await reader.readline())
        if config is not None:
            return config


def parse_cluster_config(data: bytes) -> ClusterConfig:
    """Parse a complete response held in memory.

    Bytes after the node line are ignored.

    Args:
        data: The raw response bytes.

    Returns:
        The parsed cluster configuration.
    """
    parser = ClusterConfigParser()
    # A trailing empty read stands for end of stream.
    for line in _split_lines(data) + [b""]:
        config = parser.feed_line(line)
        if config is not None:
            return config
    raise IllegalStateException("Parser consumed end of stream without result")


def _split_lines(data: bytes) -> List[bytes]:
    lines = []
    start = 0
    while start < len(data):
        end = data.find(LINE_TERMINATOR, start)
        if end < 0:
            lines.append(data[start:])
            break
        lines.append(data[start : end + 1])
        start = end + 1
    return lines
