"""Observability module for the bridge.

Provides structured logging, request correlation and health checks.
"""

from .logging_config import configure_logging, get_logger
from .request_id import (
    request_id_var,
    get_request_id,
    set_request_id,
    generate_request_id,
    accept_request_id,
)
from .middleware import MaxBodySizeMiddleware, RequestIDMiddleware

__all__ = [
    # Logging
    "configure_logging",
    "get_logger",
    # Request ID
    "request_id_var",
    "get_request_id",
    "set_request_id",
    "generate_request_id",
    "accept_request_id",
    # Middleware
    "MaxBodySizeMiddleware",
    "RequestIDMiddleware",
]
