"""Drives one assistant run to completion."""

import asyncio
from typing import Awaitable, Callable, Optional, TypeVar

from ..assistants.base import (
    BaseAssistantClient,
    FAILED_STATUSES,
    REQUIRES_ACTION,
    RunState,
)
from ..exceptions import (
    GenerationFailed,
    RemoteUnavailable,
    RunFailed,
    RunRequiresAction,
    RunTimeout,
)
from ..utils.logger import get_component_logger

T = TypeVar("T")


class RunExecutor:
    """Creates a run and polls it until it reaches a terminal status.

    ``max_wait_ms`` bounds the whole sequence, measured on the event loop's
    monotonic clock: creating the run, every status check, the sleeps in
    between and fetching the reply. A remote call still in flight when the
    budget runs out is cancelled. Cancelling the awaiting task stops polling
    but leaves the remote run alone.
    """

    def __init__(
        self,
        client: BaseAssistantClient,
        poll_interval_ms: int = 1000,
        max_wait_ms: int = 120000,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    ):
        if poll_interval_ms <= 0:
            raise ValueError("poll_interval_ms must be positive")
        if max_wait_ms <= 0:
            raise ValueError("max_wait_ms must be positive")
        self.client = client
        self.poll_interval_ms = poll_interval_ms
        self.max_wait_ms = max_wait_ms
        self._sleep = sleep
        self.logger = get_component_logger("run_executor")

    @property
    def max_attempts(self) -> int:
        """Upper bound on status checks after the run is created."""
        return self.max_wait_ms // self.poll_interval_ms + 1

    async def execute(self, thread_id: str, assistant_id: str) -> str:
        """
        Run the assistant against a thread and return its text reply.

        Args:
            thread_id: Remote thread id
            assistant_id: Assistant to run

        Returns:
            Text of the first content block of the run's reply

        Raises:
            RunFailed: run ended failed, cancelled, expired or incomplete
            RunRequiresAction: run asked for tool outputs
            RunTimeout: wait budget exhausted
            GenerationFailed: any other way of not getting text back
        """
        deadline = asyncio.get_running_loop().time() + self.max_wait_ms / 1000

        try:
            run = await self._bounded(self.client.create_run(thread_id, assistant_id), deadline)
        except RemoteUnavailable as e:
            raise GenerationFailed("Failed to start run", {"thread_id": thread_id, **e.details}) from e

        self.logger.info(f"[Run] created {run.id} on {thread_id} ({run.status})")
        run = await self._wait(run, deadline)
        return await self._extract_text(run, deadline)

    async def _bounded(self, call: Awaitable[T], deadline: float, run: Optional[RunState] = None) -> T:
        remaining = deadline - asyncio.get_running_loop().time()
        try:
            return await asyncio.wait_for(call, timeout=max(remaining, 0))
        except asyncio.TimeoutError:
            run_id = run.id if run else None
            self.logger.error(f"[Run] {run_id} remote call outlived the {self.max_wait_ms}ms budget")
            raise RunTimeout(run_id, self.max_wait_ms, run.status if run else None) from None

    async def _wait(self, run: RunState, deadline: float) -> RunState:
        loop = asyncio.get_running_loop()
        attempts = 0

        while not run.is_terminal:
            if attempts >= self.max_attempts or loop.time() >= deadline:
                self.logger.error(f"[Run] {run.id} timed out after {attempts} checks ({run.status})")
                raise RunTimeout(run.id, self.max_wait_ms, run.status)

            await self._sleep(self.poll_interval_ms / 1000)
            attempts += 1
            try:
                run = await self._bounded(self.client.get_run(run.thread_id, run.id), deadline, run)
            except RemoteUnavailable as e:
                raise GenerationFailed("Failed to poll run", {"run_id": run.id, **e.details}) from e

        return run

    async def _extract_text(self, run: RunState, deadline: float) -> str:
        if run.status in FAILED_STATUSES:
            self.logger.error(f"[Run] {run.id} ended {run.status}: {run.last_error}")
            raise RunFailed(run.id, run.status, run.last_error)
        if run.status == REQUIRES_ACTION:
            self.logger.error(f"[Run] {run.id} requires action")
            raise RunRequiresAction(run.id)

        try:
            block = await self._bounded(self.client.get_run_output(run.thread_id, run.id), deadline, run)
        except RemoteUnavailable as e:
            raise GenerationFailed("Failed to fetch run output", {"run_id": run.id, **e.details}) from e

        if block is None or block.type != "text" or block.text is None:
            raise GenerationFailed(
                "No valid response generated",
                {"run_id": run.id, "content_type": block.type if block else None},
            )

        self.logger.info(f"[Run] {run.id} completed")
        return block.text
