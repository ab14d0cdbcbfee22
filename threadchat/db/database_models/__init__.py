"""Database models (Data Objects) - map to database tables."""

from .conversation import ConversationDO, MessageDO, USER_ROLE, ASSISTANT_ROLE

__all__ = ["ConversationDO", "MessageDO", "USER_ROLE", "ASSISTANT_ROLE"]
