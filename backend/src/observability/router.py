"""Observability API endpoints.

Provides the health check used by monitoring.
"""

from fastapi import APIRouter, Request

from .logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["Observability"])


@router.get(
    "/health",
    summary="Health check endpoint",
    description="Returns service status and the number of loaded routes",
    status_code=200,
)
def health_check(request: Request):
    """Report that the bridge is up.

    An empty routing table is not unhealthy: every message then goes to
    RT's default queue.
    """
    return {
        "status": "healthy",
        "version": request.app.version,
        "routes": len(request.app.state.routing_table),
    }
