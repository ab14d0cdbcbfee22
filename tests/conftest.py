"""Shared fixtures: a scripted assistant service, stores and an orchestrator."""

import asyncio
import itertools
from datetime import datetime, timedelta
from typing import Dict, List, Optional

import pytest

from threadchat.assistants.base import BaseAssistantClient, ContentBlock, RunState
from threadchat.db.repositories.memory import InMemoryConversationStore
from threadchat.exceptions import RemoteUnavailable
from threadchat.services import ConversationOrchestrator, RunExecutor

ASSISTANT_ID = "asst_test"


class FakeAssistantClient(BaseAssistantClient):
    """In-memory assistant service with switchable failures.

    Every run replies ``"echo: <last user message>"`` unless ``reply`` or
    ``output_block`` is set. ``run_statuses`` scripts what successive
    ``get_run`` calls report after ``create_run`` returned "queued".
    """

    def __init__(self):
        self.threads: Dict[str, List[Dict[str, str]]] = {}
        self.runs: Dict[str, Dict] = {}
        self.deleted: List[str] = []
        self._ids = itertools.count(1)

        self.run_statuses: List[str] = ["in_progress", "completed"]
        self.reply: Optional[str] = None
        self.output_block: Optional[ContentBlock] = None
        self.last_error: Optional[str] = None

        self.fail_create_thread = False
        self.return_empty_thread_id = False
        self.fail_retrieve = False
        self.fail_append = False
        self.fail_create_run = False
        self.fail_get_run = False
        self.fail_delete = False

    def _next_id(self, prefix: str) -> str:
        return f"{prefix}_{next(self._ids):04d}"

    async def create_thread(self) -> str:
        await asyncio.sleep(0)
        if self.fail_create_thread:
            raise RemoteUnavailable("create_thread", "connection refused")
        if self.return_empty_thread_id:
            return ""
        thread_id = self._next_id("thread")
        self.threads[thread_id] = []
        return thread_id

    async def thread_exists(self, thread_id: str) -> bool:
        await asyncio.sleep(0)
        if self.fail_retrieve:
            raise RemoteUnavailable("retrieve_thread", "connection refused")
        return thread_id in self.threads

    async def append_message(self, thread_id: str, role: str, content: str) -> str:
        await asyncio.sleep(0)
        if self.fail_append:
            raise RemoteUnavailable("append_message", "connection refused")
        self.threads[thread_id].append({"role": role, "content": content})
        return self._next_id("msg")

    async def create_run(self, thread_id: str, assistant_id: str) -> RunState:
        await asyncio.sleep(0)
        if self.fail_create_run:
            raise RemoteUnavailable("create_run", "connection refused")
        last_user = [m for m in self.threads[thread_id] if m["role"] == "user"][-1]
        run_id = self._next_id("run")
        self.runs[run_id] = {
            "thread_id": thread_id,
            "assistant_id": assistant_id,
            "statuses": iter(self.run_statuses),
            "status": "queued",
            "reply": self.reply if self.reply is not None else f"echo: {last_user['content']}",
        }
        return RunState(id=run_id, thread_id=thread_id, status="queued")

    async def get_run(self, thread_id: str, run_id: str) -> RunState:
        await asyncio.sleep(0)
        if self.fail_get_run:
            raise RemoteUnavailable("retrieve_run", "connection refused")
        run = self.runs[run_id]
        run["status"] = next(run["statuses"], run["status"])
        if run["status"] == "completed" and not run.get("answered"):
            self.threads[thread_id].append({"role": "assistant", "content": run["reply"]})
            run["answered"] = True
        return RunState(id=run_id, thread_id=thread_id, status=run["status"], last_error=self.last_error)

    async def get_run_output(self, thread_id: str, run_id: str) -> Optional[ContentBlock]:
        await asyncio.sleep(0)
        if self.output_block is not None:
            return self.output_block
        return ContentBlock(type="text", text=self.runs[run_id]["reply"])

    async def delete_thread(self, thread_id: str) -> bool:
        await asyncio.sleep(0)
        if self.fail_delete:
            raise RemoteUnavailable("delete_thread", "connection refused")
        self.deleted.append(thread_id)
        return self.threads.pop(thread_id, None) is not None


class TickClock:
    """Clock that moves one second forward on every reading."""

    def __init__(self, start: datetime = datetime(2025, 1, 1, 12, 0, 0)):
        self.now = start

    def __call__(self) -> datetime:
        self.now += timedelta(seconds=1)
        return self.now


async def no_wait(seconds: float) -> None:
    """Stand-in for asyncio.sleep that only yields to the loop."""
    await asyncio.sleep(0)


@pytest.fixture
def fake_client():
    """Provide a fresh scripted assistant service."""
    return FakeAssistantClient()


@pytest.fixture
def store():
    """Provide an empty in-memory conversation store."""
    return InMemoryConversationStore()


@pytest.fixture
def executor(fake_client):
    """Provide a RunExecutor that polls without real delays."""
    return RunExecutor(fake_client, poll_interval_ms=10, max_wait_ms=100, sleep=no_wait)


@pytest.fixture
def orchestrator(store, fake_client, executor):
    """Provide an orchestrator over the fake service and in-memory store."""
    return ConversationOrchestrator(
        store=store,
        client=fake_client,
        run_executor=executor,
        assistant_id=ASSISTANT_ID,
        clock=TickClock(),
    )
