"""Pytest fixtures for the bridge tests.

Provides reusable test fixtures for:
- Routing tables
- A mocked mail gateway
- Settings isolated from the environment
- A TestClient around a fully wired application

Usage:
    def test_webhook(client, gateway):
        response = client.post("/mx", data={"mandrill_events": "[]"})
        assert response.status_code == 204
"""

import json
import sys
from pathlib import Path
from typing import Generator
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

backend_src = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(backend_src))

from config import Settings
from domain.gateway import GatewayResponse, MailGatewayPort
from domain.routing import RoutingTable
from main import create_app


SAMPLE_RAW_MSG = (
    "Received: from mail.example.net\n"
    "From: Alice <alice@example.net>\n"
    "To: support@example.com\n"
    "Subject: Clock drift\n"
    "\n"
    "My server is 3 seconds off.\n"
)


def make_event(event: str = "inbound", email: str = "support@example.com", **msg) -> dict:
    """Build one mandrill_events element."""
    message = {
        "raw_msg": SAMPLE_RAW_MSG,
        "email": email,
        "from_email": "alice@example.net",
        "subject": "Clock drift",
        "headers": {"Received": ["from mail.example.net", "from mx.example.net"]},
    }
    message.update(msg)
    return {"event": event, "ts": 1700000000, "msg": message}


def events_payload(*events: dict) -> str:
    return json.dumps(list(events))


@pytest.fixture
def routing_table() -> RoutingTable:
    """Routing table with address keys and a local-part key."""
    return RoutingTable({
        "support@example.com": "support",
        "abuse": "abuse",
        "servers@pool.example.org": "server-owners",
    })


@pytest.fixture
def gateway() -> AsyncMock:
    """Mail gateway mock that accepts every message."""
    gateway = AsyncMock(spec=MailGatewayPort)
    gateway.forward.return_value = GatewayResponse(
        status_code=200,
        body="RT/4.4.4 200 Ok\n\n# Ticket 42 created.",
    )
    return gateway


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings that ignore the environment and .env files."""
    return Settings(
        _env_file=None,
        ROUTING_CONFIG_PATH=str(tmp_path / "mandrill-rt.json"),
        RT_GATEWAY_URL="https://rt.example.org/REST/1.0/NoAuth/mail-gateway",
        MAX_PAYLOAD_BYTES=1024 * 1024,
    )


@pytest.fixture
def client(settings, routing_table, gateway) -> Generator[TestClient, None, None]:
    """TestClient for an app wired with the mocked gateway."""
    app = create_app(settings=settings, routing_table=routing_table, gateway=gateway)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def event_factory():
    """Factory building mandrill_events elements, see make_event."""
    return make_event


@pytest.fixture
def payload_factory():
    """Factory serializing events into a mandrill_events value."""
    return events_payload
