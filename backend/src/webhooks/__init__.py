"""Mandrill inbound webhook endpoints."""

from .router import router

__all__ = ["router"]
