"""Batch processing of Mandrill webhook events

Decodes a webhook batch, forwards every inbound message to the mail
gateway and folds the per-event results into a BatchOutcome.

Failure policy:
- A decode error aborts the batch before anything is forwarded
- A transport error or non-2xx response fails that event only
- The batch has failed if any event failed
"""

import logging

from domain.errors import GatewayRejectedError, GatewayTransportError
from domain.gateway import GatewaySubmission, MailGatewayPort
from domain.routing import AddressRouter
from .decoder import decode_events
from .models import BatchOutcome, EventResult, EventStatus, InboundEvent

logger = logging.getLogger(__name__)


class EventBatchProcessor:
    """Routes and forwards the inbound events of one webhook batch.

    Holds no per-request state, so one instance serves all requests.
    """

    def __init__(self, router: AddressRouter, gateway: MailGatewayPort):
        """Initialize processor.

        Args:
            router: Address router built from the routing table
            gateway: Mail gateway messages are forwarded to
        """
        self.router = router
        self.gateway = gateway

    async def process(self, raw_payload: str) -> BatchOutcome:
        """Decode and forward a batch of webhook events.

        Args:
            raw_payload: Value of the mandrill_events form field

        Returns:
            BatchOutcome: Per-event results and aggregate failure flag

        Raises:
            EventDecodeError: If the payload cannot be decoded
        """
        logger.debug(f"Events payload: {raw_payload}")

        events = decode_events(raw_payload)
        logger.info(f"Decoded {len(events)} event(s)")
        logger.debug(
            f"Events: {[e.model_dump(exclude={'msg': {'raw_msg'}}) for e in events]}"
        )

        outcome = BatchOutcome()
        for index, event in enumerate(events):
            if not event.is_inbound:
                logger.info(
                    f"Not dealing with '{event.event}' events",
                    extra={"event_index": index, "event_kind": event.event},
                )
                outcome.add(EventResult(
                    index=index,
                    event=event.event,
                    status=EventStatus.SKIPPED,
                ))
                continue

            outcome.add(await self.forward_event(index, event))

        logger.info(
            f"Batch done: {outcome.forwarded_count} forwarded, "
            f"{outcome.failed_count} failed, {outcome.skipped_count} skipped"
        )
        return outcome

    async def forward_event(self, index: int, event: InboundEvent) -> EventResult:
        """Route one inbound event and post it to the gateway."""
        address = event.msg.email
        log_extra = {"event_index": index, "event_kind": event.event}
        logger.info(
            f"Got message to '{address}' from '{event.msg.from_email}': {event.msg.subject}",
            extra=log_extra,
        )

        routing = self.router.route(address)
        log_extra.update(queue=routing.queue, action=routing.action.value)
        submission = GatewaySubmission.from_routing(routing, event.msg.raw_msg)

        result = EventResult(
            index=index,
            event=event.event,
            status=EventStatus.FORWARDED,
            address=address,
            routing=routing,
        )

        try:
            response = await self.gateway.forward(submission)
        except GatewayTransportError as e:
            logger.error(f"Could not forward message to '{address}': {e}", extra=log_extra)
            result.status = EventStatus.FAILED
            result.error = str(e)
            return result

        result.status_code = response.status_code

        if response.body_error:
            logger.warning(f"Error reading gateway response: {response.body_error}")
        else:
            logger.info(
                f"Gateway response ({response.status_code}): {response.body}",
                extra={**log_extra, "status_code": response.status_code},
            )

        if not response.accepted:
            rejected = GatewayRejectedError(response.status_code, response.body)
            logger.error(f"Message to '{address}' not accepted: {rejected}", extra=log_extra)
            result.status = EventStatus.FAILED
            result.error = str(rejected)

        return result
