"""Assistants - remote assistant service clients"""

from .base import BaseAssistantClient, ContentBlock, RunState
from .openai_client import OpenAIAssistantClient

__all__ = [
    "BaseAssistantClient",
    "ContentBlock",
    "RunState",
    "OpenAIAssistantClient",
]
