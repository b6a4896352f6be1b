"""Mail gateway domain module - port for delivering messages to RT."""

from .ports import GatewayResponse, GatewaySubmission, MailGatewayPort

__all__ = [
    "GatewayResponse",
    "GatewaySubmission",
    "MailGatewayPort",
]
