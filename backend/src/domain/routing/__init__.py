"""Address routing domain module - maps recipient addresses to RT queues."""

from .models import Action, RoutingResult, RoutingTable, NO_MATCH
from .address_router import AddressRouter, route, comment_target

__all__ = [
    "Action",
    "RoutingResult",
    "RoutingTable",
    "NO_MATCH",
    "AddressRouter",
    "route",
    "comment_target",
]
