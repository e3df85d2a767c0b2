"""Cluster membership resolution strategies."""

from memcache_discovery.discovery.base import ClusterConfig, Node, Resolver
from memcache_discovery.discovery.memcached import MemcachedAutoDiscovery

__all__ = [
    "ClusterConfig",
    "Node",
    "Resolver",
    "MemcachedAutoDiscovery",
]
