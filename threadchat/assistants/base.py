"""Assistant thread client abstraction."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

# Run statuses
QUEUED = "queued"
IN_PROGRESS = "in_progress"
CANCELLING = "cancelling"
COMPLETED = "completed"
FAILED = "failed"
REQUIRES_ACTION = "requires_action"
EXPIRED = "expired"
CANCELLED = "cancelled"
INCOMPLETE = "incomplete"

PENDING_STATUSES = frozenset({QUEUED, IN_PROGRESS, CANCELLING})
FAILED_STATUSES = frozenset({FAILED, CANCELLED, EXPIRED, INCOMPLETE})
TERMINAL_STATUSES = FAILED_STATUSES | {COMPLETED, REQUIRES_ACTION}


@dataclass
class RunState:
    """Snapshot of one remote run."""

    id: str
    thread_id: str
    status: str
    last_error: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES


@dataclass
class ContentBlock:
    """First content block of a run's reply. ``text`` is set for text blocks only."""

    type: str
    text: Optional[str] = None


class BaseAssistantClient(ABC):
    """Thread, message and run primitives of a remote assistant service.

    Transport failures surface as RemoteUnavailable.
    """

    @abstractmethod
    async def create_thread(self) -> str:
        """
        Create an empty thread.

        Returns:
            The new thread id
        """
        pass

    @abstractmethod
    async def thread_exists(self, thread_id: str) -> bool:
        """
        Check that a thread is still present remotely.

        Returns:
            False if the service reports the thread as not found
        """
        pass

    @abstractmethod
    async def append_message(self, thread_id: str, role: str, content: str) -> str:
        """
        Append a message to a thread.

        Returns:
            The remote message id
        """
        pass

    @abstractmethod
    async def create_run(self, thread_id: str, assistant_id: str) -> RunState:
        """Start a run of ``assistant_id`` against the thread."""
        pass

    @abstractmethod
    async def get_run(self, thread_id: str, run_id: str) -> RunState:
        """Fetch the current state of a run."""
        pass

    @abstractmethod
    async def get_run_output(self, thread_id: str, run_id: str) -> Optional[ContentBlock]:
        """Fetch the first content block of the newest message the run produced."""
        pass

    @abstractmethod
    async def delete_thread(self, thread_id: str) -> bool:
        """
        Delete a thread.

        Returns:
            True if the service confirmed the deletion
        """
        pass
