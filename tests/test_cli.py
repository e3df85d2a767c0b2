"""Tests for the memcache-discovery command line entry point."""

import json
import logging

import pytest
from unittest.mock import patch

from memcache_discovery.cli import (
    EXIT_CONFIG_ERROR,
    EXIT_OK,
    EXIT_PROTOCOL_ERROR,
    EXIT_TRANSPORT_ERROR,
    build_config,
    format_config,
    main,
    parse_args,
)
from memcache_discovery.discovery.base import ClusterConfig, Node
from memcache_discovery.exceptions import (
    ConfigurationException,
    ConnectionTimeoutException,
    ConsistencyException,
)
from memcache_discovery.logging import DISCOVERY_ROOT_LOGGER


CLUSTER = ClusterConfig(
    version=2,
    nodes=(Node("node1", "10.0.0.1", 11211), Node("node2", "10.0.0.2", 11211)),
)

RESOLVE_SYNC = "memcache_discovery.cli.MemcachedAutoDiscovery.resolve_sync"


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    root = logging.getLogger(DISCOVERY_ROOT_LOGGER)
    for handler in list(root.handlers):
        root.removeHandler(handler)
    root.setLevel(logging.NOTSET)


class TestBuildConfig:
    """Tests for merging the config file with command line overrides."""

    def test_endpoint_only(self):
        config = build_config(parse_args(["cfg.example.com:11211"]))
        assert config.endpoint == "cfg.example.com:11211"
        assert config.operation_timeout is None

    def test_overrides(self):
        args = parse_args(["cfg:11211", "--dial-timeout", "1.5", "--timeout", "4"])
        config = build_config(args)
        assert config.dial_timeout == 1.5
        assert config.operation_timeout == 4.0

    def test_config_file(self, tmp_path):
        path = tmp_path / "discovery.yml"
        path.write_text(
            "memcache_discovery:\n  endpoint: file.example.com:11211\n  dial_timeout: 3\n",
            encoding="utf-8",
        )

        config = build_config(parse_args(["--config", str(path)]))

        assert config.endpoint == "file.example.com:11211"
        assert config.dial_timeout == 3

    def test_command_line_wins_over_file(self, tmp_path):
        path = tmp_path / "discovery.yml"
        path.write_text("endpoint: file.example.com:11211\n", encoding="utf-8")

        config = build_config(parse_args(["cli.example.com:11211", "--config", str(path)]))

        assert config.endpoint == "cli.example.com:11211"

    def test_missing_endpoint(self):
        with pytest.raises(ConfigurationException):
            build_config(parse_args([]))


class TestFormatConfig:
    """Tests for rendering a cluster configuration."""

    def test_plain(self):
        assert format_config(CLUSTER) == (
            "version 2\n"
            "node1 10.0.0.1 11211\n"
            "node2 10.0.0.2 11211"
        )

    def test_json(self):
        data = json.loads(format_config(CLUSTER, as_json=True))
        assert data["version"] == 2
        assert data["nodes"][1] == {"hostname": "node2", "ip": "10.0.0.2", "port": 11211}


class TestMain:
    """Tests for main() exit codes and output."""

    def test_success(self, capsys):
        with patch(RESOLVE_SYNC, return_value=CLUSTER) as mock_resolve:
            code = main(["cfg.example.com:11211"])

        assert code == EXIT_OK
        mock_resolve.assert_called_once_with("cfg.example.com:11211")
        assert capsys.readouterr().out.startswith("version 2\nnode1 10.0.0.1 11211")

    def test_success_json(self, capsys):
        with patch(RESOLVE_SYNC, return_value=CLUSTER):
            code = main(["cfg.example.com:11211", "--json"])

        assert code == EXIT_OK
        assert json.loads(capsys.readouterr().out)["version"] == 2

    def test_transport_error(self, capsys):
        with patch(RESOLVE_SYNC, side_effect=ConnectionTimeoutException("timed out")):
            code = main(["cfg.example.com:11211"])

        assert code == EXIT_TRANSPORT_ERROR
        assert "Transport error: timed out" in capsys.readouterr().err

    def test_protocol_error(self, capsys):
        error = ConsistencyException("size mismatch", expected=50, actual=45)
        with patch(RESOLVE_SYNC, side_effect=error):
            code = main(["cfg.example.com:11211"])

        assert code == EXIT_PROTOCOL_ERROR
        assert "Protocol error: size mismatch" in capsys.readouterr().err

    def test_unencodable_hostname_is_transport_error(self, capsys):
        assert main(["a..example.com:11211", "--dial-timeout", "1"]) == EXIT_TRANSPORT_ERROR
        assert "Transport error" in capsys.readouterr().err

    def test_missing_endpoint(self, capsys):
        assert main([]) == EXIT_CONFIG_ERROR
        assert "Configuration error" in capsys.readouterr().err

    def test_invalid_timeout(self):
        assert main(["cfg.example.com:11211", "--timeout", "-1"]) == EXIT_CONFIG_ERROR

    def test_invalid_endpoint(self):
        assert main(["cfg.example.com:nope"]) == EXIT_CONFIG_ERROR

    def test_missing_config_file(self, tmp_path):
        assert main(["--config", str(tmp_path / "missing.yml")]) == EXIT_CONFIG_ERROR

    def test_verbose_sets_debug(self):
        with patch(RESOLVE_SYNC, return_value=CLUSTER):
            main(["cfg.example.com:11211", "-v"])

        assert logging.getLogger(DISCOVERY_ROOT_LOGGER).level == logging.DEBUG
