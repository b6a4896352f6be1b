"""RT Mail Gateway Adapter - Implementation of MailGatewayPort using httpx.

Posts messages to Request Tracker's mail-gateway REST endpoint
(/REST/1.0/NoAuth/mail-gateway), the same endpoint rt-mailgate uses.

Architecture: Hexagonal - Adapter implementation in infrastructure layer
"""

import logging
from typing import Optional

import httpx

from domain.errors import GatewayTransportError
from domain.gateway import GatewayResponse, GatewaySubmission, MailGatewayPort

logger = logging.getLogger(__name__)


class RTMailGateway(MailGatewayPort):
    """Mail gateway adapter posting form submissions to RT.

    The NoAuth endpoint takes no credentials; RT restricts it by client
    address instead.

    Example:
        gateway = RTMailGateway(
            url="https://rt.example.org/REST/1.0/NoAuth/mail-gateway",
            timeout=30.0,
        )
        response = await gateway.forward(
            GatewaySubmission(queue="support", action=Action.CORRESPOND, message=raw)
        )
        await gateway.aclose()
    """

    def __init__(
        self,
        url: str,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize RT gateway adapter.

        Args:
            url: Full mail-gateway URL
            timeout: Timeout in seconds for each call
            client: Shared httpx client (not closed by aclose); a private
                client is created when omitted
        """
        self.url = url
        self.timeout = timeout
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=timeout)

    async def forward(self, submission: GatewaySubmission) -> GatewayResponse:
        """Post one message to the mail gateway.

        The status code is returned as-is; deciding whether it counts as a
        failure is left to the caller. A failure while reading the body is
        reported in GatewayResponse.body_error.

        Raises:
            GatewayTransportError: If no response was received
        """
        logger.debug(
            f"Posting message to {self.url} "
            f"(queue='{submission.queue}', action={submission.action.value})"
        )

        try:
            async with self.client.stream(
                "POST",
                self.url,
                data=submission.form_fields(),
                timeout=self.timeout,
            ) as response:
                try:
                    await response.aread()
                except httpx.HTTPError as e:
                    return GatewayResponse(
                        status_code=response.status_code,
                        body_error=f"{type(e).__name__}: {e}",
                    )
                return GatewayResponse(
                    status_code=response.status_code,
                    body=response.text,
                )
        except httpx.HTTPError as e:
            raise GatewayTransportError(
                f"POST {self.url} failed: {type(e).__name__}: {e}"
            ) from e

    async def aclose(self) -> None:
        """Close the HTTP client if this adapter created it."""
        if self._owns_client:
            await self.client.aclose()
