"""Chat API models."""

import re
from datetime import datetime
from typing import List
from pydantic import BaseModel, Field, field_validator

# Conversation ids are remote thread ids, e.g. "thread_abc123"
CONVERSATION_ID_PATTERN = re.compile(r'^[A-Za-z0-9_-]{1,128}$')

MAX_MESSAGE_LENGTH = 32000


class SendMessageRequest(BaseModel):
    """Request model for sending a message."""

    conversation_id: str = Field(description="Conversation (thread) ID")
    message: str = Field(description="Message text", min_length=1, max_length=MAX_MESSAGE_LENGTH)

    @field_validator('conversation_id')
    @classmethod
    def validate_conversation_id(cls, v):
        """Validate conversation id format."""
        if not CONVERSATION_ID_PATTERN.match(v):
            raise ValueError(f"Invalid conversation_id '{v}'")
        return v

    @field_validator('message')
    @classmethod
    def validate_message(cls, v):
        if not v.strip():
            raise ValueError("message must not be blank")
        return v


class CreateConversationResponse(BaseModel):
    """Response model for a new conversation."""

    conversation_id: str = Field(description="Conversation (thread) ID")
    created_at: datetime = Field(description="Creation timestamp")


class SendMessageResponse(BaseModel):
    """Response model for an assistant reply."""

    response: str = Field(description="Assistant reply text")
    conversation_id: str = Field(description="Conversation (thread) ID")


class ConversationSummaryResponse(BaseModel):
    """Response model for one listed conversation."""

    conversation_id: str = Field(description="Conversation (thread) ID")
    created_at: datetime = Field(description="Creation timestamp")
    updated_at: datetime = Field(description="Last update timestamp")


class ConversationListResponse(BaseModel):
    """Response model for listing conversations."""

    conversations: List[ConversationSummaryResponse] = Field(description="Most recently updated first")
    total: int = Field(description="Total number of conversations")


class MessageResponse(BaseModel):
    """Response model for a single transcript entry."""

    role: str = Field(description="Message role (user/assistant)")
    content: str = Field(description="Message content")
    created_at: datetime = Field(description="Message timestamp")


class ConversationHistoryResponse(BaseModel):
    """Response model for a conversation transcript."""

    conversation_id: str = Field(description="Conversation (thread) ID")
    messages: List[MessageResponse] = Field(description="Messages in chronological order")
    created_at: datetime = Field(description="Creation timestamp")
    updated_at: datetime = Field(description="Last update timestamp")


class DeleteConversationResponse(BaseModel):
    """Response model for ending a conversation."""

    status: str = Field(default="deleted")
    message: str = Field(description="Human readable outcome")
