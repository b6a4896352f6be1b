"""
MailGatewayPort - Port interface for the ticketing system's mail gateway

Domain logic depends only on this Port. The RT REST adapter lives in
infrastructure.gateway; tests substitute fakes.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from domain.routing import Action, RoutingResult


@dataclass(frozen=True)
class GatewaySubmission:
    """
    One message to deliver to the mail gateway.

    Attributes:
        queue: Target RT queue ("" lets RT pick its default queue)
        action: correspond or comment
        message: Raw RFC 822 message text
    """
    queue: str
    action: Action
    message: str

    @classmethod
    def from_routing(cls, routing: RoutingResult, message: str) -> "GatewaySubmission":
        return cls(queue=routing.queue, action=routing.action, message=message)

    def form_fields(self) -> dict[str, str]:
        """Form fields expected by RT's mail-gateway endpoint."""
        return {
            "queue": self.queue,
            "action": self.action.value,
            "message": self.message,
        }


@dataclass
class GatewayResponse:
    """
    Response received from the mail gateway.

    Attributes:
        status_code: HTTP status returned by the gateway
        body: Response body text ("" if it could not be read)
        body_error: Description of a failure reading the body, if any
    """
    status_code: int
    body: str = ""
    body_error: Optional[str] = None

    @property
    def accepted(self) -> bool:
        """Whether the gateway accepted the message (status <= 299)."""
        return self.status_code <= 299


class MailGatewayPort(ABC):
    """
    Abstract interface for delivering messages to the ticketing system.

    Implementations:
    - Return a GatewayResponse for every HTTP response, whatever its status
    - Raise GatewayTransportError when no response was received
    - Never retry; each submission is attempted exactly once
    """

    @abstractmethod
    async def forward(self, submission: GatewaySubmission) -> GatewayResponse:
        """
        Deliver one message to the gateway.

        Args:
            submission: Queue, action and raw message to post

        Returns:
            GatewayResponse: Status and body of the gateway's answer

        Raises:
            GatewayTransportError: If the gateway could not be reached
        """
        pass

    async def aclose(self) -> None:
        """Release any resources held by the gateway."""
        return None
