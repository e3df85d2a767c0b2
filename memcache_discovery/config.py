"""Memcache discovery configuration."""

import os
from typing import Optional

import yaml

from memcache_discovery.exceptions import ConfigurationException


class DiscoveryConfig:
    """Configuration for resolving a memcached cluster.

    Attributes:
        endpoint: Optional configuration endpoint in host:port form.
        dial_timeout: Seconds allowed for establishing the connection.
        operation_timeout: Optional seconds allowed for a whole resolution.

    Example:
        Basic configuration::

            config = DiscoveryConfig()
            config.endpoint = "cfg.example.com:11211"
            config.dial_timeout = 2.0

        From YAML file::

            config = DiscoveryConfig.from_yaml("memcache-discovery.yml")

        The YAML document may hold the settings at top level or under a
        ``memcache_discovery`` key::

            memcache_discovery:
              endpoint: cfg.example.com:11211
              dial_timeout: 2.0
              operation_timeout: 10.0
    """

    DEFAULT_DIAL_TIMEOUT = 5.0
    ROOT_KEY = "memcache_discovery"

    def __init__(
        self,
        endpoint: Optional[str] = None,
        dial_timeout: float = DEFAULT_DIAL_TIMEOUT,
        operation_timeout: Optional[float] = None,
    ):
        self._endpoint = self._check_endpoint(endpoint)
        self._dial_timeout = self._check_timeout("dial_timeout", dial_timeout)
        self._operation_timeout = (
            None
            if operation_timeout is None
            else self._check_timeout("operation_timeout", operation_timeout)
        )

    @staticmethod
    def _check_endpoint(value: Optional[str]) -> Optional[str]:
        if value is not None and not str(value).strip():
            raise ConfigurationException("endpoint cannot be empty")
        return value

    @staticmethod
    def _check_timeout(name: str, value: float) -> float:
        # bool is an int subclass
        if not isinstance(value, (int, float)) or isinstance(value, bool):
            raise ConfigurationException(f"{name} must be a number, got {value!r}")
        if value <= 0:
            raise ConfigurationException(f"{name} must be positive, got {value!r}")
        return value

    @property
    def endpoint(self) -> Optional[str]:
        """Get the configuration endpoint address."""
        return self._endpoint

    @endpoint.setter
    def endpoint(self, value: Optional[str]) -> None:
        self._endpoint = self._check_endpoint(value)

    @property
    def dial_timeout(self) -> float:
        """Get the dial timeout in seconds."""
        return self._dial_timeout

    @dial_timeout.setter
    def dial_timeout(self, value: float) -> None:
        self._dial_timeout = self._check_timeout("dial_timeout", value)

    @property
    def operation_timeout(self) -> Optional[float]:
        """Get the overall operation timeout in seconds, if any."""
        return self._operation_timeout

    @operation_timeout.setter
    def operation_timeout(self, value: Optional[float]) -> None:
        if value is not None:
            value = self._check_timeout("operation_timeout", value)
        self._operation_timeout = value

    @classmethod
    def from_dict(cls, data: dict) -> "DiscoveryConfig":
        """Create DiscoveryConfig from a dictionary."""
        if not isinstance(data, dict):
            raise ConfigurationException(
                f"Configuration must be a mapping, got {type(data).__name__}"
            )
        if cls.ROOT_KEY in data:
            data = data[cls.ROOT_KEY] or {}
            if not isinstance(data, dict):
                raise ConfigurationException(
                    f"{cls.ROOT_KEY} must be a mapping, got {type(data).__name__}"
                )

        unknown = set(data) - {"endpoint", "dial_timeout", "operation_timeout"}
        if unknown:
            raise ConfigurationException(
                f"Unknown configuration keys: {', '.join(sorted(unknown))}"
            )

        return cls(
            endpoint=data.get("endpoint"),
            dial_timeout=data.get("dial_timeout", cls.DEFAULT_DIAL_TIMEOUT),
            operation_timeout=data.get("operation_timeout"),
        )

    @classmethod
    def from_yaml(cls, yaml_path: str) -> "DiscoveryConfig":
        """Load configuration from a YAML file.

        Args:
            yaml_path: Path to the YAML configuration file.

        Returns:
            DiscoveryConfig instance.

        Raises:
            ConfigurationException: If the file cannot be read or parsed.
        """
        if not os.path.exists(yaml_path):
            raise ConfigurationException(f"Configuration file not found: {yaml_path}")

        try:
            with open(yaml_path, "r", encoding="utf-8") as f:
                content = f.read()
        except IOError as e:
            raise ConfigurationException(
                f"Failed to read configuration file: {e}", cause=e
            )

        return cls.from_yaml_string(content)

    @classmethod
    def from_yaml_string(cls, yaml_content: str) -> "DiscoveryConfig":
        """Load configuration from a YAML string.

        Args:
            yaml_content: YAML configuration as a string.

        Returns:
            DiscoveryConfig instance.

        Raises:
            ConfigurationException: If the YAML cannot be parsed.
        """
        try:
            data = yaml.safe_load(yaml_content)
        except yaml.YAMLError as e:
            raise ConfigurationException(f"Failed to parse YAML: {e}", cause=e)

        if data is None:
            data = {}

        return cls.from_dict(data)

    def __repr__(self) -> str:
        return (
            f"DiscoveryConfig(endpoint={self._endpoint!r}, "
            f"dial_timeout={self._dial_timeout!r}, "
            f"operation_timeout={self._operation_timeout!r})"
        )
