"""Routing domain models

Routing table, routing actions and routing results.
"""

from collections.abc import Mapping
from enum import Enum
from typing import Iterator, NamedTuple, Optional


class Action(str, Enum):
    """RT mail-gateway action for a forwarded message.

    CORRESPOND opens a ticket or replies on an existing one,
    COMMENT attaches the message as a private comment.
    """
    CORRESPOND = "correspond"
    COMMENT = "comment"


class RoutingResult(NamedTuple):
    """Queue and action for one destination address.

    An empty queue means no table entry matched and RT applies its
    default queue.
    """
    queue: str
    action: Action

    @property
    def matched(self) -> bool:
        return bool(self.queue)


NO_MATCH = RoutingResult("", Action.CORRESPOND)


class RoutingTable(Mapping):
    """Read-only mapping of routing target to RT queue name.

    Targets are full addresses ("support@example.com") or bare local parts
    ("support"). Iteration follows insertion order, which for a loaded
    config file is the order of the keys in the JSON object.

    Keys are kept exactly as given. Routing lowercases the incoming address
    only, so a mixed-case key never matches.
    """

    __slots__ = ("_targets",)

    def __init__(self, targets: Optional[Mapping] = None):
        self._targets: dict[str, str] = dict(targets or {})

    @classmethod
    def empty(cls) -> "RoutingTable":
        return cls()

    def __getitem__(self, target: str) -> str:
        return self._targets[target]

    def __iter__(self) -> Iterator[str]:
        return iter(self._targets)

    def __len__(self) -> int:
        return len(self._targets)

    def __repr__(self) -> str:
        return f"RoutingTable({self._targets!r})"
