"""Address to queue routing

Maps the destination address of an inbound message to an RT queue and
action using the routing table:

    support@example.com          -> (support, correspond)
    support-comment@example.com  -> (support, comment)
    support@other.example        -> (support, correspond)  if "support" is a key
    unknown@example.com          -> ("", correspond)

The full address is tried against every entry before the bare local part,
so an address key always wins over a local-part key.
"""

import logging

from .models import Action, RoutingResult, RoutingTable, NO_MATCH

logger = logging.getLogger(__name__)

COMMENT_SUFFIX = "-comment"


def comment_target(target: str) -> str:
    """Return the comment variant of a routing target.

    The suffix goes in front of the first "@" when the target has a local
    part, otherwise it is appended:

        support@example.com -> support-comment@example.com
        support             -> support-comment
    """
    idx = target.find("@")
    if idx > 0:
        return target[:idx] + COMMENT_SUFFIX + target[idx:]
    return target + COMMENT_SUFFIX


def route(address: str, table: RoutingTable) -> RoutingResult:
    """Find the queue and action for a destination address.

    Args:
        address: Destination address of the inbound message (any case,
            may be empty or malformed)
        table: Routing table to match against

    Returns:
        RoutingResult: Matching queue and action, or NO_MATCH
    """
    address = address.lower()

    idx = address.find("@")
    if idx < 1:
        return NO_MATCH

    local = address[:idx]

    for candidate in (address, local):
        for target, queue in table.items():
            if candidate == target:
                return RoutingResult(queue, Action.CORRESPOND)
            if candidate == comment_target(target):
                return RoutingResult(queue, Action.COMMENT)

    return NO_MATCH


class AddressRouter:
    """Routes destination addresses against a fixed routing table."""

    def __init__(self, table: RoutingTable):
        self.table = table

    def route(self, address: str) -> RoutingResult:
        result = route(address, self.table)
        if result.matched:
            logger.debug(
                f"Routed '{address}' to queue '{result.queue}' ({result.action.value})"
            )
        else:
            logger.debug(f"No route for '{address}', using default queue")
        return result
