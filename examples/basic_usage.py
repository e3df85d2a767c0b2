"""Basic usage example for memcache-discovery.

This example demonstrates how to:
- Configure a resolver
- Resolve the members of a cluster from its configuration endpoint
- Tell transport failures apart from malformed responses
- Re-resolve and detect a changed topology
"""

import asyncio
import logging
import sys

from memcache_discovery import (
    DiscoveryConfig,
    MemcachedAutoDiscovery,
    ProtocolException,
    TransportException,
    configure_logging,
)


async def main(endpoint: str):
    configure_logging(level=logging.INFO)

    # Create configuration
    config = DiscoveryConfig(endpoint=endpoint, dial_timeout=2.0, operation_timeout=10.0)
    resolver = MemcachedAutoDiscovery.from_config(config)

    try:
        cluster = await resolver.resolve(config.endpoint)
    except TransportException as e:
        # Endpoint unreachable or too slow; usually worth retrying
        print(f"Could not reach {endpoint}: {e}")
        return
    except ProtocolException as e:
        print(f"Endpoint sent a malformed response: {e}")
        return

    print(f"Cluster config version {cluster.version}")
    for node in cluster.nodes:
        print(f"  {node.hostname} -> {node.address}")

    # Poll once more and compare versions
    await asyncio.sleep(5)
    latest = await resolver.resolve(config.endpoint)
    if latest.is_newer_than(cluster):
        print(f"Topology changed: {cluster.addresses} -> {latest.addresses}")
    else:
        print("Topology unchanged")


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else "localhost:11211"))
