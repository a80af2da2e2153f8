"""API v1."""

from eventhub.api.v1.router import router

__all__ = ["router"]
