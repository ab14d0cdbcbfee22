"""Services package."""

from .run_executor import RunExecutor
from .conversation_orchestrator import (
    ConversationOrchestrator,
    ConversationCreated,
    ConversationHistory,
    ConversationSummary,
    MessageReply,
)

__all__ = [
    "RunExecutor",
    "ConversationOrchestrator",
    "ConversationCreated",
    "ConversationHistory",
    "ConversationSummary",
    "MessageReply",
]
