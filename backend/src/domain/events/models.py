"""Webhook event and batch outcome models

Pydantic models for the events Mandrill posts in the mandrill_events form
field, and dataclasses describing what happened to each of them.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from domain.routing import RoutingResult


# Only inbound events carry a message to route; send, hard_bounce, open,
# click, ... are delivery notifications for outgoing mail.
INBOUND_EVENT = "inbound"


def _drop_nulls(data: Any) -> Any:
    """Treat JSON null fields as absent so they take their default."""
    if isinstance(data, dict):
        return {key: value for key, value in data.items() if value is not None}
    return data


class MandrillMessage(BaseModel):
    """Message payload of an inbound event.

    Headers are left untyped: values may be strings, lists of strings
    (repeated headers such as Received) or nested objects.
    """
    model_config = ConfigDict(extra="ignore")

    raw_msg: str = Field("", description="Full raw RFC 822 message")
    email: str = Field("", description="Address the message was delivered to")
    from_email: str = ""
    from_name: str = ""
    subject: str = ""
    text: str = ""
    headers: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def null_fields_take_defaults(cls, data: Any) -> Any:
        return _drop_nulls(data)


class InboundEvent(BaseModel):
    """One element of the mandrill_events array."""
    model_config = ConfigDict(extra="ignore")

    event: str = Field("", description="Event kind, e.g. inbound or send")
    ts: Any = Field(None, description="Event timestamp, passed through undecoded")
    msg: MandrillMessage = Field(default_factory=MandrillMessage)

    @model_validator(mode="before")
    @classmethod
    def null_fields_take_defaults(cls, data: Any) -> Any:
        return _drop_nulls(data)

    @property
    def is_inbound(self) -> bool:
        return self.event == INBOUND_EVENT


class EventStatus(str, Enum):
    """What happened to one event of a batch."""
    FORWARDED = "FORWARDED"  # Gateway accepted the message
    FAILED = "FAILED"        # Transport error or non-2xx response
    SKIPPED = "SKIPPED"      # Not an inbound event


@dataclass
class EventResult:
    """Outcome for a single event of a batch."""
    index: int
    event: str
    status: EventStatus
    address: str = ""
    routing: Optional[RoutingResult] = None
    status_code: Optional[int] = None
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.status == EventStatus.FAILED


@dataclass
class BatchOutcome:
    """Results of a whole batch.

    The batch has failed if any single event failed; skipped events never
    count as failures.
    """
    results: list[EventResult] = field(default_factory=list)

    def add(self, result: EventResult) -> None:
        self.results.append(result)

    @property
    def failed(self) -> bool:
        return any(result.failed for result in self.results)

    def count(self, status: EventStatus) -> int:
        return sum(1 for result in self.results if result.status == status)

    @property
    def forwarded_count(self) -> int:
        return self.count(EventStatus.FORWARDED)

    @property
    def failed_count(self) -> int:
        return self.count(EventStatus.FAILED)

    @property
    def skipped_count(self) -> int:
        return self.count(EventStatus.SKIPPED)
