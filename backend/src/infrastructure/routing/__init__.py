"""Routing table loading."""

from .config_loader import load_routing_table, load_routing_table_or_empty

__all__ = ["load_routing_table", "load_routing_table_or_empty"]
