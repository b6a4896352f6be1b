"""Mandrill inbound webhook endpoints

Mandrill posts batches of events as a form with a single mandrill_events
field holding a JSON array. Before a webhook is saved Mandrill checks the
URL with a HEAD request.

Response codes for POST:
- 204: every inbound event was accepted by RT (or there were none)
- 503: at least one event could not be forwarded; Mandrill retries the batch
- 500: the events payload could not be decoded
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status

from config import Settings
from dependencies import get_app_settings, get_processor
from domain.errors import EventDecodeError
from domain.events import EventBatchProcessor
from observability.logging_config import get_logger

logger = get_logger(__name__)

EVENTS_FIELD = "mandrill_events"

router = APIRouter(tags=["Webhooks"])


@router.head("/mx", status_code=status.HTTP_200_OK)
async def probe_webhook() -> Response:
    """Liveness probe used by Mandrill when the webhook is registered."""
    return Response(status_code=status.HTTP_200_OK)


@router.post(
    "/mx",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={
        500: {"description": "Events payload could not be decoded"},
        503: {"description": "One or more events could not be forwarded"},
    },
)
async def receive_events(
    request: Request,
    processor: Annotated[EventBatchProcessor, Depends(get_processor)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> Response:
    """Forward the inbound messages of a Mandrill webhook batch to RT."""
    async with request.form(max_part_size=settings.MAX_PAYLOAD_BYTES) as form:
        raw_events = form.get(EVENTS_FIELD)

    # A missing field (or a file upload in its place) reads as an empty
    # string, which fails to decode below.
    if not isinstance(raw_events, str):
        raw_events = ""

    try:
        outcome = await processor.process(raw_events)
    except EventDecodeError as e:
        logger.error(f"Could not decode events: {e}")
        return Response(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    if outcome.failed:
        logger.warning(f"{outcome.failed_count} event(s) could not be forwarded")
        return Response(status_code=status.HTTP_503_SERVICE_UNAVAILABLE)

    return Response(status_code=status.HTTP_204_NO_CONTENT)
