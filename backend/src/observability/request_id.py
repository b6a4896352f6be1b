"""Request ID management for request correlation.

Each webhook delivery carries an ID that is attached to every log line
written while its batch is processed. Mandrill does not send one, so an ID
is generated unless a proxy in front of the bridge supplied a usable one.
"""

import re
import uuid
from contextvars import ContextVar
from typing import Optional

NO_REQUEST_ID = "no-request-id"

# Proxy-supplied IDs are echoed into headers and logs, so keep them short and plain
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")

# Context variable for request_id (async-safe)
request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def generate_request_id() -> str:
    """Generate a new UUID v4 request ID."""
    return str(uuid.uuid4())


def accept_request_id(header_value: Optional[str]) -> str:
    """Return the incoming X-Request-ID if usable, otherwise a fresh one."""
    if header_value and _VALID_REQUEST_ID.match(header_value):
        return header_value
    return generate_request_id()


def get_request_id() -> str:
    return request_id_var.get() or NO_REQUEST_ID


def set_request_id(request_id: str) -> None:
    request_id_var.set(request_id)
