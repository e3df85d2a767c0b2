"""Cluster configuration types and the resolver interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class Node:
    """Represents a memcached cluster member advertised by the endpoint.

    Attributes:
        hostname: DNS name advertised by the member.
        ip: Literal IP address advertised by the member. Not validated.
        port: Memcached port of the member.
    """

    hostname: str
    ip: str
    port: int

    @property
    def address(self) -> str:
        """Get the address string in ip:port format."""
        if ":" in self.ip:
            return f"[{self.ip}]:{self.port}"
        return f"{self.ip}:{self.port}"


@dataclass(frozen=True)
class ClusterConfig:
    """A versioned snapshot of cluster membership.

    Instances are only ever built fully populated by the parser and are
    immutable once returned. Nodes keep the order they had on the wire.

    Attributes:
        version: Configuration version reported by the endpoint.
        nodes: Cluster members in wire order.
    """

    version: int
    nodes: Tuple[Node, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if not isinstance(self.nodes, tuple):
            object.__setattr__(self, "nodes", tuple(self.nodes))

    @property
    def addresses(self) -> List[str]:
        """Get the member addresses in ip:port format, in node order."""
        return [node.address for node in self.nodes]

    def is_newer_than(self, other: Optional["ClusterConfig"]) -> bool:
        """Check whether this snapshot supersedes a previously seen one.

        Args:
            other: The previously seen configuration, or None.

        Returns:
            True if there is no previous configuration or its version is
            lower than this one.
        """
        if other is None:
            return True
        return self.version > other.version


class Resolver(ABC):
    """Interface for cluster membership resolution strategies.

    Each implementation performs exactly one resolution attempt per call
    and keeps no state between calls; retries, caching and connection
    pooling are left to the caller.
    """

    @abstractmethod
    async def resolve(self, address: str) -> ClusterConfig:
        """Resolve the cluster configuration served at an endpoint.

        Args:
            address: Configuration endpoint in host:port form.

        Returns:
            The current cluster configuration.

        Raises:
            TransportException: If the endpoint cannot be reached.
            ProtocolException: If the response is malformed.
        """
        pass
