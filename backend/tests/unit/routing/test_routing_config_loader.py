"""Unit tests for the routing config file loader."""

import json
import logging

import pytest

from domain.errors import RoutingConfigError
from domain.routing import RoutingTable, route
from infrastructure.routing import load_routing_table, load_routing_table_or_empty


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "mandrill-rt.json"
    path.write_text(json.dumps({
        "support@ntppool.org": "support",
        "vendors": "vendors",
    }))
    return path


class TestLoadRoutingTable:
    """Test load_routing_table"""

    def test_loads_targets_in_file_order(self, config_file):
        table = load_routing_table(config_file)

        assert isinstance(table, RoutingTable)
        assert list(table.items()) == [
            ("support@ntppool.org", "support"),
            ("vendors", "vendors"),
        ]

    def test_accepts_string_path(self, config_file):
        assert len(load_routing_table(str(config_file))) == 2

    def test_keys_are_not_lowercased(self, tmp_path):
        path = tmp_path / "routes.json"
        path.write_text('{"Support@Example.com": "support"}')

        table = load_routing_table(path)

        assert list(table) == ["Support@Example.com"]
        assert route("support@example.com", table) == ("", "correspond")

    def test_empty_object(self, tmp_path):
        path = tmp_path / "routes.json"
        path.write_text("{}")
        assert len(load_routing_table(path)) == 0

    def test_missing_file(self, tmp_path):
        with pytest.raises(RoutingConfigError) as exc_info:
            load_routing_table(tmp_path / "missing.json")
        assert "missing.json" in str(exc_info.value)

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "routes.json"
        path.write_text('{"support": ')
        with pytest.raises(RoutingConfigError, match="invalid JSON"):
            load_routing_table(path)

    def test_non_object_top_level(self, tmp_path):
        path = tmp_path / "routes.json"
        path.write_text('["support"]')
        with pytest.raises(RoutingConfigError, match="expected a JSON object"):
            load_routing_table(path)

    def test_non_string_queue(self, tmp_path):
        path = tmp_path / "routes.json"
        path.write_text('{"support": 1}')
        with pytest.raises(RoutingConfigError, match="must be a string"):
            load_routing_table(path)


class TestLoadRoutingTableOrEmpty:
    """Startup loading never fails"""

    def test_returns_loaded_table(self, config_file):
        assert len(load_routing_table_or_empty(config_file)) == 2

    def test_missing_file_gives_empty_table(self, tmp_path, caplog):
        with caplog.at_level(logging.ERROR):
            table = load_routing_table_or_empty(tmp_path / "missing.json")

        assert len(table) == 0
        assert "Could not load routing config" in caplog.text
