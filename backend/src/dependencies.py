"""FastAPI dependencies for the webhook routes.

The processor and routing table are built once in create_app and kept on
app.state; routes get them through these dependencies so tests can swap
them with app.dependency_overrides.
"""

from fastapi import Request

from config import Settings
from domain.events import EventBatchProcessor


def get_processor(request: Request) -> EventBatchProcessor:
    """Event batch processor shared by all requests."""
    return request.app.state.processor


def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings
