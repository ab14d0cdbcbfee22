"""Repository layer for data access."""

from .base import BaseConversationStore
from .conversation import ConversationRepository
from .memory import InMemoryConversationStore

__all__ = ["BaseConversationStore", "ConversationRepository", "InMemoryConversationStore"]
