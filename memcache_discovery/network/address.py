"""Configuration endpoint address parsing."""

from memcache_discovery.exceptions import ConfigurationException


class Address:
    """Represents a network address of a configuration endpoint."""

    DEFAULT_PORT = 11211

    def __init__(self, host: str, port: int = DEFAULT_PORT):
        if not host:
            raise ConfigurationException("Address host cannot be empty")
        if not (0 < port <= 65535):
            raise ConfigurationException(
                f"Invalid port: {port}. Must be between 1 and 65535"
            )
        self._host = host
        self._port = port

    @property
    def host(self) -> str:
        return self._host

    @property
    def port(self) -> int:
        return self._port

    def __str__(self) -> str:
        if ":" in self._host:
            return f"[{self._host}]:{self._port}"
        return f"{self._host}:{self._port}"

    def __repr__(self) -> str:
        return f"Address({self._host!r}, {self._port})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Address):
            return False
        return self._host == other._host and self._port == other._port

    def __hash__(self) -> int:
        return hash((self._host, self._port))


class AddressHelper:
    """Utility class for parsing endpoint addresses."""

    @staticmethod
    def parse(address_string: str) -> Address:
        """Parse an address string into an Address object.

        Args:
            address_string: Address in format "host:port", "[ipv6]:port"
                or "host".

        Returns:
            Address object.

        Raises:
            ConfigurationException: If the address is empty or its port
                is not a valid TCP port.
        """
        address_string = (address_string or "").strip()
        if not address_string:
            raise ConfigurationException("Endpoint address cannot be empty")

        if address_string.startswith("["):
            bracket_end = address_string.find("]")
            if bracket_end < 0:
                raise ConfigurationException(
                    f"Unterminated IPv6 literal in address: {address_string}"
                )
            host = address_string[1:bracket_end]
            rest = address_string[bracket_end + 1 :]
            if not rest:
                return Address(host)
            if not rest.startswith(":"):
                raise ConfigurationException(f"Invalid address: {address_string}")
            return Address(host, AddressHelper._parse_port(rest[1:], address_string))

        colon_count = address_string.count(":")
        if colon_count == 1:
            host, port_str = address_string.rsplit(":", 1)
            return Address(host, AddressHelper._parse_port(port_str, address_string))
        # Bare IPv6 literals carry several colons and no port.
        return Address(address_string)

    @staticmethod
    def _parse_port(port_str: str, address_string: str) -> int:
        if not port_str.isascii() or not port_str.isdigit():
            raise ConfigurationException(
                f"Invalid port in address: {address_string}"
            )
        return int(port_str)
