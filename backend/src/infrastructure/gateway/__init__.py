"""Mail gateway adapters."""

from .rt_mail_gateway import RTMailGateway

__all__ = ["RTMailGateway"]
