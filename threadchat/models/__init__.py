"""Pydantic models for API request/response."""

from .chat import (
    SendMessageRequest,
    CreateConversationResponse,
    SendMessageResponse,
    ConversationSummaryResponse,
    ConversationListResponse,
    MessageResponse,
    ConversationHistoryResponse,
    DeleteConversationResponse,
)

__all__ = [
    "SendMessageRequest",
    "CreateConversationResponse",
    "SendMessageResponse",
    "ConversationSummaryResponse",
    "ConversationListResponse",
    "MessageResponse",
    "ConversationHistoryResponse",
    "DeleteConversationResponse",
]
