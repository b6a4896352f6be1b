"""Unit tests for the mandrill-rt command line entry point."""

import json
from unittest.mock import Mock

import pytest

import main
from config import get_settings


@pytest.fixture
def uvicorn_run(monkeypatch):
    run = Mock()
    monkeypatch.setattr(main.uvicorn, "run", run)
    monkeypatch.setattr(main, "configure_logging", Mock())
    get_settings.cache_clear()
    yield run
    get_settings.cache_clear()


class TestRun:
    """Test run()"""

    def test_serves_on_listen_address(self, uvicorn_run, tmp_path):
        config_path = tmp_path / "mandrill-rt.json"
        config_path.write_text(json.dumps({"support@example.com": "support"}))

        main.run(["--config", str(config_path), "--listen", "127.0.0.1:9000"])

        uvicorn_run.assert_called_once()
        app = uvicorn_run.call_args.args[0]
        assert uvicorn_run.call_args.kwargs["host"] == "127.0.0.1"
        assert uvicorn_run.call_args.kwargs["port"] == 9000
        assert dict(app.state.routing_table) == {"support@example.com": "support"}

    def test_accepts_single_dash_flags(self, uvicorn_run, tmp_path):
        main.run(["-config", str(tmp_path / "missing.json"), "-listen", ":8100"])

        assert uvicorn_run.call_args.kwargs["host"] == "0.0.0.0"
        assert uvicorn_run.call_args.kwargs["port"] == 8100

    def test_missing_config_still_serves(self, uvicorn_run, tmp_path):
        main.run(["--config", str(tmp_path / "missing.json"), "--listen", ":8002"])

        app = uvicorn_run.call_args.args[0]
        assert len(app.state.routing_table) == 0

    def test_invalid_listen_address_exits(self, uvicorn_run):
        with pytest.raises(SystemExit):
            main.run(["--listen", "nowhere"])

        uvicorn_run.assert_not_called()
