"""Decoding of the mandrill_events form field."""

import json

from pydantic import TypeAdapter, ValidationError

from domain.errors import EventDecodeError
from .models import InboundEvent

_event_list = TypeAdapter(list[InboundEvent])


def decode_events(raw_payload: str) -> list[InboundEvent]:
    """Parse a JSON array of webhook events.

    A JSON null decodes as an empty batch. Anything else that is not an
    array of event objects is rejected.

    Raises:
        EventDecodeError: If the payload is not valid JSON or does not
            match the event schema
    """
    try:
        data = json.loads(raw_payload)
    except ValueError as e:
        raise EventDecodeError(f"Events payload is not valid JSON: {e}") from e

    if data is None:
        return []

    if not isinstance(data, list):
        raise EventDecodeError(
            f"Events payload must be a JSON array, got {type(data).__name__}"
        )

    try:
        return _event_list.validate_python(data)
    except ValidationError as e:
        raise EventDecodeError(
            f"Events payload does not match the event schema: {e.error_count()} error(s)"
        ) from e
