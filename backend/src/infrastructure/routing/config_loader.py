"""Routing config file loader.

The config file is a JSON object mapping routing targets to RT queues:

    {
        "support@example.com": "support",
        "abuse": "abuse"
    }
"""

import json
import logging
from pathlib import Path
from typing import Union

from domain.errors import RoutingConfigError
from domain.routing import RoutingTable

logger = logging.getLogger(__name__)


def load_routing_table(path: Union[str, Path]) -> RoutingTable:
    """Load the routing table from a JSON config file.

    Keys are kept as written in the file.

    Raises:
        RoutingConfigError: If the file cannot be read or is not a JSON
            object of string values
    """
    path = Path(path)

    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise RoutingConfigError(str(path), str(e)) from e

    try:
        data = json.loads(content)
    except ValueError as e:
        raise RoutingConfigError(str(path), f"invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise RoutingConfigError(
            str(path), f"expected a JSON object, got {type(data).__name__}"
        )

    for target, queue in data.items():
        if not isinstance(queue, str):
            raise RoutingConfigError(
                str(path), f"queue for '{target}' must be a string"
            )

    return RoutingTable(data)


def load_routing_table_or_empty(path: Union[str, Path]) -> RoutingTable:
    """Load the routing table, falling back to an empty table on error.

    A missing or broken config must not keep the bridge from starting;
    with an empty table every message goes to RT's default queue.
    """
    try:
        table = load_routing_table(path)
    except RoutingConfigError as e:
        logger.error(str(e))
        return RoutingTable.empty()

    logger.info(f"Loaded {len(table)} route(s) from '{path}'")
    return table
