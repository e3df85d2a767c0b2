"""Memcached cluster auto-discovery client."""

from memcache_discovery.discovery import (
    ClusterConfig,
    MemcachedAutoDiscovery,
    Node,
    Resolver,
)
from memcache_discovery.config import DiscoveryConfig
from memcache_discovery.protocol import ClusterConfigParser, parse_cluster_config
from memcache_discovery.exceptions import (
    DiscoveryException,
    ConfigurationException,
    IllegalStateException,
    TransportException,
    ConnectionTimeoutException,
    OperationTimeoutException,
    ProtocolException,
    FramingException,
    ConsistencyException,
    NodeFormatException,
)
from memcache_discovery.logging import configure_logging, get_logger

__version__ = "0.1.0"

__all__ = [
    "ClusterConfig",
    "Node",
    "Resolver",
    "MemcachedAutoDiscovery",
    "DiscoveryConfig",
    "ClusterConfigParser",
    "parse_cluster_config",
    "DiscoveryException",
    "ConfigurationException",
    "IllegalStateException",
    "TransportException",
    "ConnectionTimeoutException",
    "OperationTimeoutException",
    "ProtocolException",
    "FramingException",
    "ConsistencyException",
    "NodeFormatException",
    "configure_logging",
    "get_logger",
]
