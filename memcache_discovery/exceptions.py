"""Memcache discovery exceptions.

This module defines the exception hierarchy for cluster resolution.
All exceptions inherit from :class:`DiscoveryException`.

Transport failures (:class:`TransportException`) and protocol failures
(:class:`ProtocolException`) are kept apart so callers can apply different
retry heuristics to each.

Example:
    Handling resolution failures::

        from memcache_discovery.exceptions import (
            ConsistencyException,
            ProtocolException,
            TransportException,
        )

        try:
            config = resolver.resolve_sync("cfg.example.com:11211")
        except TransportException:
            print("Endpoint unreachable, try again later")
        except ConsistencyException as e:
            print(f"Truncated payload: {e.expected} != {e.actual}")
        except ProtocolException as e:
            print(f"Bad response: {e}")
"""


class DiscoveryException(Exception):
    """Base class for all discovery exceptions.

    Args:
        message: The error message describing the exception.
        cause: The underlying exception that caused this error, if any.

    Attributes:
        cause: The underlying cause of this exception, if any.
    """

    def __init__(self, message: str = "", cause: Exception = None):
        super().__init__(message)
        self.cause = cause


class ConfigurationException(DiscoveryException):
    """Raised when there is a configuration error.

    Example:
        - Malformed endpoint address
        - Non-positive timeout values
        - Unreadable YAML configuration
    """
    pass


class IllegalStateException(DiscoveryException):
    """Raised when an operation is invoked on an illegal state.

    Example:
        - Connecting a connection twice
        - Feeding lines to a parser that already finished
    """
    pass


class TransportException(DiscoveryException):
    """Raised when the configuration endpoint cannot be talked to.

    Covers dial failures (refusal, DNS failure of the endpoint hostname),
    write/flush failures and read failures. These are usually transient and
    safe to retry.
    """
    pass


class ConnectionTimeoutException(TransportException):
    """Raised when the connection is not established within the dial timeout."""
    pass


class OperationTimeoutException(TransportException):
    """Raised when a whole resolution exceeds its operation timeout."""
    pass


class ProtocolException(DiscoveryException):
    """Raised when the endpoint answers with an unusable response.

    No partial cluster configuration is ever returned alongside this error.
    """
    pass


class FramingException(ProtocolException):
    """Raised when the response framing is broken.

    Example:
        - Header line missing or not newline terminated
        - Header with a token count other than four
        - Non-numeric payload size or version
    """
    pass


class ConsistencyException(ProtocolException):
    """Raised when the declared payload size does not match the bytes received.

    Args:
        message: The error message.
        expected: Payload size declared in the response header.
        actual: Combined byte length of the version and node lines.

    Example:
        >>> try:
        ...     config = parse_cluster_config(data)
        ... except ConsistencyException as e:
        ...     print(f"expected {e.expected} bytes, got {e.actual}")
    """

    def __init__(self, message: str, expected: int = -1, actual: int = -1):
        super().__init__(message)
        self._expected = expected
        self._actual = actual

    @property
    def expected(self) -> int:
        """Get the payload size declared by the header."""
        return self._expected

    @property
    def actual(self) -> int:
        """Get the payload size actually received."""
        return self._actual


class NodeFormatException(ProtocolException):
    """Raised when a node entry is not a valid ``hostname|ip|port`` triple.

    Args:
        message: The error message.
        entry: The raw node entry that failed to parse.
    """

    def __init__(self, message: str, entry: str = ""):
        super().__init__(message)
        self._entry = entry

    @property
    def entry(self) -> str:
        """Get the offending raw node entry."""
        return self._entry
