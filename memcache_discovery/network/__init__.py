"""Network layer for talking to configuration endpoints."""

from memcache_discovery.network.address import Address, AddressHelper
from memcache_discovery.network.connection import ConfigConnection, ConnectionState

__all__ = [
    "Address",
    "AddressHelper",
    "ConfigConnection",
    "ConnectionState",
]
