"""Memcached auto-discovery through a cluster configuration endpoint."""

import asyncio
from typing import Optional

from memcache_discovery.config import DiscoveryConfig
from memcache_discovery.discovery.base import ClusterConfig, Resolver
from memcache_discovery.exceptions import (
    ConfigurationException,
    DiscoveryException,
    OperationTimeoutException,
)
from memcache_discovery.logging import get_logger
from memcache_discovery.network.address import AddressHelper
from memcache_discovery.network.connection import ConfigConnection
from memcache_discovery.protocol.parser import CONFIG_GET_CLUSTER, read_cluster_config

_logger = get_logger("resolver")


class MemcachedAutoDiscovery(Resolver):
    """Resolver speaking the memcached ``config get cluster`` protocol.

    Each call dials the endpoint, sends one request, parses the response
    and closes the socket, whatever the outcome. Nothing is shared between
    calls, so one instance may serve concurrent resolutions.

    Example:
        Async usage::

            resolver = MemcachedAutoDiscovery(dial_timeout=2.0)
            config = await resolver.resolve("cfg.example.com:11211")
            for node in config.nodes:
                print(node.hostname, node.ip, node.port)

        Blocking usage::

            config = MemcachedAutoDiscovery().resolve_sync("cfg.example.com:11211")
    """

    def __init__(
        self,
        dial_timeout: float = DiscoveryConfig.DEFAULT_DIAL_TIMEOUT,
        operation_timeout: Optional[float] = None,
    ):
        """Initialize the resolver.

        Args:
            dial_timeout: Maximum seconds to establish the TCP connection.
            operation_timeout: Optional bound in seconds on a whole
                resolution, reads included. None leaves reads unbounded.
        """
        if dial_timeout <= 0:
            raise ConfigurationException("dial_timeout must be positive")
        if operation_timeout is not None and operation_timeout <= 0:
            raise ConfigurationException("operation_timeout must be positive")
        self._dial_timeout = dial_timeout
        self._operation_timeout = operation_timeout

    @classmethod
    def from_config(cls, config: DiscoveryConfig) -> "MemcachedAutoDiscovery":
        """Create a resolver from a :class:`DiscoveryConfig`."""
        return cls(
            dial_timeout=config.dial_timeout,
            operation_timeout=config.operation_timeout,
        )

    @property
    def dial_timeout(self) -> float:
        return self._dial_timeout

    @property
    def operation_timeout(self) -> Optional[float]:
        return self._operation_timeout

    async def resolve(self, address: str) -> ClusterConfig:
        """Resolve the cluster configuration served at an endpoint.

        Cancelling the calling task aborts any pending socket operation;
        the socket is closed before the cancellation propagates.

        Args:
            address: Configuration endpoint in host:port form.

        Returns:
            The current cluster configuration.

        Raises:
            ConfigurationException: If the address cannot be parsed.
            TransportException: If the endpoint cannot be reached, or the
                operation timeout expires.
            ProtocolException: If the response is malformed.
        """
        endpoint = AddressHelper.parse(address)
        _logger.debug("Resolving cluster config from %s", endpoint)

        try:
            if self._operation_timeout is None:
                config = await self._resolve(endpoint)
            else:
                try:
                    config = await asyncio.wait_for(
                        self._resolve(endpoint), timeout=self._operation_timeout
                    )
                except asyncio.TimeoutError as e:
                    raise OperationTimeoutException(
                        f"Resolving {endpoint} did not complete within "
                        f"{self._operation_timeout}s",
                        cause=e,
                    )
        except DiscoveryException as e:
            _logger.warning("Failed to resolve cluster config from %s: %s", endpoint, e)
            raise

        _logger.info(
            "Resolved cluster config version %d with %d node(s) from %s",
            config.version,
            len(config.nodes),
            endpoint,
        )
        return config

    async def _resolve(self, endpoint) -> ClusterConfig:
        async with ConfigConnection(endpoint, self._dial_timeout) as connection:
            await connection.send_request(CONFIG_GET_CLUSTER)
            return await read_cluster_config(connection)

    def resolve_sync(self, address: str) -> ClusterConfig:
        """Blocking variant of :meth:`resolve` for callers without a loop.

        Must not be called from a running event loop.
        """
        return asyncio.run(self.resolve(address))

    def __repr__(self) -> str:
        return (
            f"MemcachedAutoDiscovery(dial_timeout={self._dial_timeout!r}, "
            f"operation_timeout={self._operation_timeout!r})"
        )
