"""Mandrill to RT bridge - Main FastAPI Application

Receives Mandrill inbound webhooks and forwards each message to the
Request Tracker mail gateway, choosing queue and action from the
recipient address.

This module creates and configures the FastAPI application, including:
- Webhook and health routers
- Middleware (request ID correlation, request body limit)
- Exception handlers
- The mandrill-rt command line entry point
"""

import argparse
import logging
from contextlib import asynccontextmanager
from typing import Optional, Sequence

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from config import Settings, get_settings, parse_listen_address
from domain.events import EventBatchProcessor
from domain.gateway import MailGatewayPort
from domain.routing import AddressRouter, RoutingTable
from infrastructure.gateway import RTMailGateway
from infrastructure.routing import load_routing_table_or_empty
from observability.logging_config import configure_logging
from observability.middleware import MaxBodySizeMiddleware, RequestIDMiddleware
from observability.router import router as observability_router
from webhooks.router import router as webhooks_router

logger = logging.getLogger(__name__)

APP_VERSION = "0.1.0"


def create_app(
    settings: Optional[Settings] = None,
    routing_table: Optional[RoutingTable] = None,
    gateway: Optional[MailGatewayPort] = None,
) -> FastAPI:
    """Application factory.

    Args:
        settings: Settings to use (default: get_settings())
        routing_table: Routing table (default: loaded from
            settings.ROUTING_CONFIG_PATH, empty if that fails)
        gateway: Mail gateway (default: RTMailGateway for
            settings.RT_GATEWAY_URL)

    Returns:
        FastAPI: Configured application
    """
    settings = settings or get_settings()
    if routing_table is None:
        routing_table = load_routing_table_or_empty(settings.ROUTING_CONFIG_PATH)
    if gateway is None:
        gateway = RTMailGateway(
            url=settings.RT_GATEWAY_URL,
            timeout=settings.GATEWAY_TIMEOUT_SECONDS,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Mandrill RT bridge starting up...")
        logger.info(f"Forwarding to {settings.RT_GATEWAY_URL} with {len(routing_table)} route(s)")

        yield

        logger.info("Mandrill RT bridge shutting down...")
        await gateway.aclose()

    app = FastAPI(
        title="Mandrill RT Bridge",
        description="Forwards Mandrill inbound email webhooks to the RT mail gateway",
        version=APP_VERSION,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.routing_table = routing_table
    app.state.gateway = gateway
    app.state.processor = EventBatchProcessor(AddressRouter(routing_table), gateway)

    # =========================================================================
    # MIDDLEWARE CONFIGURATION
    # =========================================================================

    app.add_middleware(RequestIDMiddleware)
    # Added last so it wraps the request ID middleware and sees the body first
    app.add_middleware(MaxBodySizeMiddleware, max_body_size=settings.MAX_PAYLOAD_BYTES)

    # =========================================================================
    # EXCEPTION HANDLERS
    # =========================================================================

    @app.exception_handler(Exception)
    async def generic_exception_handler(
        request: Request,
        exc: Exception
    ) -> JSONResponse:
        """Handle uncaught exceptions.

        Full details are logged but not exposed to the client.
        """
        logger.error(
            f"Unhandled exception on {request.method} {request.url.path}",
            exc_info=exc
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "internal_error",
                "message": "An unexpected error occurred.",
            },
        )

    # =========================================================================
    # ROUTER REGISTRATION
    # =========================================================================

    app.include_router(observability_router)
    app.include_router(webhooks_router)

    return app


# =============================================================================
# COMMAND LINE
# =============================================================================

def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mandrill-rt",
        description="Forward Mandrill inbound webhooks to the RT mail gateway",
    )
    parser.add_argument(
        "--config", "-config",
        dest="config",
        help="pathname of JSON routing configuration file "
             "(default: ROUTING_CONFIG_PATH or mandrill-rt.json)",
    )
    parser.add_argument(
        "--listen", "-listen",
        dest="listen",
        help="listen address (default: LISTEN or :8002)",
    )
    return parser


def run(argv: Optional[Sequence[str]] = None) -> None:
    """Entry point for the mandrill-rt console script."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    overrides = {}
    if args.config:
        overrides["ROUTING_CONFIG_PATH"] = args.config
    if args.listen:
        overrides["LISTEN"] = args.listen
    settings = get_settings().model_copy(update=overrides)

    configure_logging(level=settings.LOG_LEVEL, json_format=settings.LOG_JSON)

    try:
        host, port = parse_listen_address(settings.LISTEN)
    except ValueError as e:
        parser.error(str(e))

    app = create_app(settings)

    uvicorn.run(
        app,
        host=host,
        port=port,
        log_level=settings.LOG_LEVEL.lower(),
        log_config=None,
    )


if __name__ == "__main__":
    run()
