"""OpenAI Assistants API client."""

from typing import Optional

import openai
from openai import AsyncOpenAI

from .base import BaseAssistantClient, ContentBlock, RunState
from ..exceptions import RemoteUnavailable
from ..utils.logger import get_component_logger


class OpenAIAssistantClient(BaseAssistantClient):
    """Wraps ``client.beta.threads`` of the OpenAI SDK."""

    def __init__(self, client: AsyncOpenAI):
        self.client = client
        self.logger = get_component_logger("openai")

    @classmethod
    def from_settings(cls, settings) -> "OpenAIAssistantClient":
        kwargs = {}
        if settings.openai_api_key:
            kwargs["api_key"] = settings.openai_api_key
        if settings.openai_base_url:
            kwargs["base_url"] = settings.openai_base_url
        return cls(AsyncOpenAI(**kwargs))

    def _unavailable(self, operation: str, error: Exception, **details) -> RemoteUnavailable:
        self.logger.error(f"[OpenAI] {operation} failed: {error}")
        return RemoteUnavailable(operation, str(error), details)

    @staticmethod
    def _to_run_state(run) -> RunState:
        last_error = None
        if run.last_error is not None:
            last_error = f"{run.last_error.code}: {run.last_error.message}"
        return RunState(id=run.id, thread_id=run.thread_id, status=run.status, last_error=last_error)

    async def create_thread(self) -> str:
        try:
            thread = await self.client.beta.threads.create()
        except openai.OpenAIError as e:
            raise self._unavailable("create_thread", e) from e
        if not thread or not thread.id:
            raise RemoteUnavailable("create_thread", "Failed to create OpenAI thread")
        return thread.id

    async def thread_exists(self, thread_id: str) -> bool:
        try:
            thread = await self.client.beta.threads.retrieve(thread_id)
        except openai.NotFoundError:
            return False
        except openai.OpenAIError as e:
            raise self._unavailable("retrieve_thread", e, thread_id=thread_id) from e
        return bool(thread and thread.id)

    async def append_message(self, thread_id: str, role: str, content: str) -> str:
        try:
            message = await self.client.beta.threads.messages.create(
                thread_id, role=role, content=content
            )
        except openai.OpenAIError as e:
            raise self._unavailable("append_message", e, thread_id=thread_id) from e
        return message.id

    async def create_run(self, thread_id: str, assistant_id: str) -> RunState:
        try:
            run = await self.client.beta.threads.runs.create(
                thread_id=thread_id, assistant_id=assistant_id
            )
        except openai.OpenAIError as e:
            raise self._unavailable("create_run", e, thread_id=thread_id) from e
        return self._to_run_state(run)

    async def get_run(self, thread_id: str, run_id: str) -> RunState:
        try:
            run = await self.client.beta.threads.runs.retrieve(run_id, thread_id=thread_id)
        except openai.OpenAIError as e:
            raise self._unavailable("retrieve_run", e, thread_id=thread_id, run_id=run_id) from e
        return self._to_run_state(run)

    async def get_run_output(self, thread_id: str, run_id: str) -> Optional[ContentBlock]:
        try:
            page = await self.client.beta.threads.messages.list(
                thread_id, run_id=run_id, order="desc", limit=1
            )
        except openai.OpenAIError as e:
            raise self._unavailable("list_messages", e, thread_id=thread_id, run_id=run_id) from e

        if not page.data or not page.data[0].content:
            return None
        block = page.data[0].content[0]
        if block.type == "text":
            return ContentBlock(type="text", text=block.text.value)
        return ContentBlock(type=block.type)

    async def delete_thread(self, thread_id: str) -> bool:
        try:
            result = await self.client.beta.threads.delete(thread_id)
        except openai.OpenAIError as e:
            raise self._unavailable("delete_thread", e, thread_id=thread_id) from e
        return bool(result.deleted)
