"""Database package - connection, models, and repositories."""

from .connection import DatabaseConnection
from .repositories import BaseConversationStore, ConversationRepository, InMemoryConversationStore

__all__ = [
    "DatabaseConnection",
    "BaseConversationStore",
    "ConversationRepository",
    "InMemoryConversationStore",
]
