"""Error types raised by the bridge.

Every error derives from BridgeError so the HTTP boundary and the startup
code can tell bridge failures apart from programming errors.
"""

from typing import Optional


class BridgeError(Exception):
    """Base exception for all bridge errors."""
    pass


class RoutingConfigError(BridgeError):
    """Routing config file is missing, unreadable, or malformed.

    Non-fatal: startup logs it and continues with an empty routing table.
    """

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Could not load routing config '{path}': {reason}")


class EventDecodeError(BridgeError):
    """Webhook events payload is not a valid JSON array of events.

    Mapped to HTTP 500 by the webhook endpoint; nothing is forwarded.
    """
    pass


class GatewayError(BridgeError):
    """Base class for failures forwarding a message to the RT gateway."""
    pass


class GatewayTransportError(GatewayError):
    """The gateway could not be reached (connect, TLS, timeout, ...)."""
    pass


class GatewayRejectedError(GatewayError):
    """The gateway answered with a non-2xx status."""

    def __init__(self, status_code: int, body: Optional[str] = None):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Gateway rejected message with HTTP {status_code}")
