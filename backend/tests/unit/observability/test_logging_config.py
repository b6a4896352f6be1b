"""Unit tests for JSON logging and request ID correlation."""

import json
import logging
import sys

import pytest

from observability.logging_config import JSONFormatter, RequestIDFilter, configure_logging
from observability.request_id import accept_request_id, get_request_id, request_id_var, set_request_id


@pytest.fixture
def request_id():
    token = request_id_var.set("req-123")
    yield "req-123"
    request_id_var.reset(token)


def make_record(msg: str = "Forwarded message", **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="domain.events.processor",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestRequestID:
    """Test request ID context"""

    def test_default_outside_request(self):
        assert get_request_id() == "no-request-id"

    def test_set_request_id(self, request_id):
        set_request_id("req-456")
        assert get_request_id() == "req-456"

    def test_accepts_plain_incoming_id(self):
        assert accept_request_id("mandrill-batch:42") == "mandrill-batch:42"

    @pytest.mark.parametrize("header_value", [None, "", "has space", "x" * 129])
    def test_generates_id_for_unusable_header(self, header_value):
        request_id = accept_request_id(header_value)

        assert request_id != header_value
        assert len(request_id) == 36


class TestJSONFormatter:
    """Test JSON log line format"""

    def test_formats_record_as_json(self, request_id):
        record = make_record()
        RequestIDFilter().filter(record)

        data = json.loads(JSONFormatter().format(record))

        assert data["level"] == "INFO"
        assert data["request_id"] == "req-123"
        assert data["logger"] == "domain.events.processor"
        assert data["message"] == "Forwarded message"
        assert data["timestamp"].endswith("Z")

    def test_includes_request_extras(self):
        record = make_record(status_code=204, duration_ms=1.5)

        data = json.loads(JSONFormatter().format(record))

        assert data["status_code"] == 204
        assert data["duration_ms"] == 1.5
        assert data["request_id"] == "no-request-id"

    def test_includes_event_extras(self):
        record = make_record(event_index=2, event_kind="inbound", queue="support", action="comment")

        data = json.loads(JSONFormatter().format(record))

        assert data["event_index"] == 2
        assert data["event_kind"] == "inbound"
        assert data["queue"] == "support"
        assert data["action"] == "comment"

    def test_omits_absent_extras(self):
        data = json.loads(JSONFormatter().format(make_record()))

        assert "event_index" not in data
        assert "method" not in data

    def test_includes_exception(self):
        try:
            raise ValueError("bad payload")
        except ValueError:
            record = make_record()
            record.exc_info = sys.exc_info()

        data = json.loads(JSONFormatter().format(record))

        assert data["error"] == "bad payload"
        assert "ValueError" in data["traceback"]


class TestConfigureLogging:
    """Test root logger setup"""

    def test_installs_single_handler(self):
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            configure_logging(level="debug", json_format=False)

            assert root.level == logging.DEBUG
            assert len(root.handlers) == 1
            assert logging.getLogger("httpx").level == logging.WARNING
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)
