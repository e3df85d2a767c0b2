"""Command line entry point for resolving a memcached cluster.

Usage:
    memcache-discovery [ENDPOINT] [OPTIONS]

Options:
    --config FILE          YAML configuration file
    --dial-timeout SECS    Connection timeout (overrides the config file)
    --timeout SECS         Overall operation timeout (overrides the config file)
    --json                 Print the cluster configuration as JSON
    --verbose, -v          Enable debug logging

Exit Codes:
    0 - Cluster configuration resolved
    1 - Transport error (endpoint unreachable, timeout)
    2 - Protocol error (malformed response)
    3 - Configuration error
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from memcache_discovery.config import DiscoveryConfig
from memcache_discovery.discovery.base import ClusterConfig
from memcache_discovery.discovery.memcached import MemcachedAutoDiscovery
from memcache_discovery.exceptions import (
    ConfigurationException,
    ProtocolException,
    TransportException,
)
from memcache_discovery.logging import configure_logging

EXIT_OK = 0
EXIT_TRANSPORT_ERROR = 1
EXIT_PROTOCOL_ERROR = 2
EXIT_CONFIG_ERROR = 3


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="memcache-discovery",
        description="Resolve the members of a memcached cluster from its configuration endpoint",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "endpoint",
        nargs="?",
        help="Configuration endpoint in host:port form (default: from --config)",
    )
    parser.add_argument(
        "--config",
        help="YAML configuration file",
    )
    parser.add_argument(
        "--dial-timeout",
        type=float,
        help=f"Connection timeout in seconds (default: {DiscoveryConfig.DEFAULT_DIAL_TIMEOUT})",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        help="Overall operation timeout in seconds (default: none)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the cluster configuration as JSON",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> DiscoveryConfig:
    """Merge the configuration file with command line overrides."""
    if args.config:
        config = DiscoveryConfig.from_yaml(args.config)
    else:
        config = DiscoveryConfig()

    if args.endpoint:
        config.endpoint = args.endpoint
    if args.dial_timeout is not None:
        config.dial_timeout = args.dial_timeout
    if args.timeout is not None:
        config.operation_timeout = args.timeout

    if not config.endpoint:
        raise ConfigurationException(
            "No endpoint given on the command line or in the configuration file"
        )
    return config


def format_config(config: ClusterConfig, as_json: bool = False) -> str:
    """Render a cluster configuration for the terminal."""
    if as_json:
        return json.dumps(
            {
                "version": config.version,
                "nodes": [
                    {"hostname": node.hostname, "ip": node.ip, "port": node.port}
                    for node in config.nodes
                ],
            },
            indent=2,
        )

    lines = [f"version {config.version}"]
    for node in config.nodes:
        lines.append(f"{node.hostname} {node.ip} {node.port}")
    return "\n".join(lines)


def main(argv: Optional[List[str]] = None) -> int:
    """Resolve the cluster once and print it.

    Returns:
        Exit code (0=success, 1=transport error, 2=protocol error,
        3=configuration error)
    """
    args = parse_args(argv)
    configure_logging(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        config = build_config(args)
        resolver = MemcachedAutoDiscovery.from_config(config)
        cluster = resolver.resolve_sync(config.endpoint)
    except ConfigurationException as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR
    except TransportException as e:
        print(f"Transport error: {e}", file=sys.stderr)
        return EXIT_TRANSPORT_ERROR
    except ProtocolException as e:
        print(f"Protocol error: {e}", file=sys.stderr)
        return EXIT_PROTOCOL_ERROR

    print(format_config(cluster, as_json=args.json))
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
