"""API v1 package."""

from .chat import router as chat_router

__all__ = ["chat_router"]
