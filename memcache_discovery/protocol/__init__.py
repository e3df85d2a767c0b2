"""Memcached cluster configuration protocol."""

from memcache_discovery.protocol.parser import (
    CONFIG_GET_CLUSTER,
    ClusterConfigParser,
    ParserState,
    parse_cluster_config,
    read_cluster_config,
)

__all__ = [
    "CONFIG_GET_CLUSTER",
    "ClusterConfigParser",
    "ParserState",
    "parse_cluster_config",
    "read_cluster_config",
]
