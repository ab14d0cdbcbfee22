"""Conversation database model."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List

from ...utils.clock import utcnow

USER_ROLE = "user"
ASSISTANT_ROLE = "assistant"


@dataclass
class MessageDO:
    """One transcript entry, stored inside the conversation's messages column."""

    role: str
    content: str
    created_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "role": self.role,
            "content": self.content,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MessageDO":
        created_at = data["created_at"]
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at)
        return cls(
            role=data["role"],
            content=data["content"],
            created_at=created_at,
        )


@dataclass
class ConversationDO:
    """Conversation data object - maps to conversations table.

    ``id`` is the remote thread id.
    """

    id: str
    owner_id: str
    messages: List[MessageDO] = field(default_factory=list)
    is_active: bool = True
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
