"""Events domain module - Mandrill webhook events and batch processing."""

from .models import (
    INBOUND_EVENT,
    BatchOutcome,
    EventResult,
    EventStatus,
    InboundEvent,
    MandrillMessage,
)
from .decoder import decode_events
from .processor import EventBatchProcessor

__all__ = [
    "INBOUND_EVENT",
    "BatchOutcome",
    "EventResult",
    "EventStatus",
    "InboundEvent",
    "MandrillMessage",
    "decode_events",
    "EventBatchProcessor",
]
