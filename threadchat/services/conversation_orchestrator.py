"""Conversation orchestration across the remote thread and the local record.

The assistant service is the source of truth for which messages were
accepted: a message is appended remotely first and only recorded locally
once the whole exchange succeeded. The local record is saved whole, once
per exchange.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional

from .run_executor import RunExecutor
from ..assistants.base import BaseAssistantClient
from ..db.database_models.conversation import (
    ASSISTANT_ROLE,
    USER_ROLE,
    ConversationDO,
    MessageDO,
)
from ..db.repositories.base import BaseConversationStore
from ..exceptions import (
    GenerationFailed,
    NotFoundOrUnauthorized,
    PersistenceError,
    RemoteThreadMissing,
    RemoteUnavailable,
    Unauthorized,
    ValidationError,
)
from ..utils.clock import utcnow
from ..utils.locks import KeyedLock
from ..utils.logger import get_component_logger


@dataclass
class ConversationCreated:
    id: str
    created_at: datetime


@dataclass
class MessageReply:
    response: str
    conversation_id: str


@dataclass
class ConversationSummary:
    id: str
    created_at: datetime
    updated_at: datetime


@dataclass
class ConversationHistory:
    id: str
    messages: List[MessageDO]
    created_at: datetime
    updated_at: datetime


class ConversationOrchestrator:
    """Start, continue, list, read and end an owner's conversations.

    ``send_message`` and ``end_conversation`` on the same conversation id are
    serialized by a per-id lock, so concurrent sends cannot overwrite each
    other's transcript. The lock is process-local.
    """

    def __init__(
        self,
        store: BaseConversationStore,
        client: BaseAssistantClient,
        run_executor: RunExecutor,
        assistant_id: str,
        clock: Optional[Callable[[], datetime]] = None
    ):
        """
        Args:
            store: Local conversation store
            client: Remote assistant thread client
            run_executor: Executor that turns a thread into a reply
            assistant_id: Assistant that answers every conversation
            clock: Source of timestamps, naive UTC
        """
        self.store = store
        self.client = client
        self.run_executor = run_executor
        self.assistant_id = assistant_id
        self._clock = clock or utcnow
        self._locks = KeyedLock()
        self.logger = get_component_logger("orchestrator")

    @staticmethod
    def _require_owner(owner_id: Optional[str]) -> str:
        if not owner_id:
            raise Unauthorized()
        return owner_id

    def _find_owned(self, owner_id: str, conversation_id: str, active_only: bool = True) -> ConversationDO:
        filters = {"id": conversation_id, "owner_id": owner_id}
        if active_only:
            filters["is_active"] = True
        conversation = self.store.find_one(**filters)
        if conversation is None:
            raise NotFoundOrUnauthorized(conversation_id)
        return conversation

    def _save(self, conversation: ConversationDO) -> None:
        if not self.store.save(conversation):
            raise PersistenceError(
                "Failed to save conversation", {"conversation_id": conversation.id}
            )

    async def start_conversation(self, owner_id: str) -> ConversationCreated:
        """
        Create a remote thread and its local twin.

        Raises:
            RemoteUnavailable: the thread could not be created
            PersistenceError: the local record could not be written; the
                remote thread is then orphaned
        """
        owner_id = self._require_owner(owner_id)

        thread_id = await self.client.create_thread()
        if not thread_id:
            raise RemoteUnavailable("create_thread", "Failed to create thread")

        now = self._clock()
        conversation = ConversationDO(
            id=thread_id,
            owner_id=owner_id,
            messages=[],
            is_active=True,
            created_at=now,
            updated_at=now,
        )
        if not self.store.insert(conversation):
            self.logger.error(f"Remote thread {thread_id} orphaned: local insert failed")
            raise PersistenceError(
                "Failed to create chat thread", {"orphaned_thread_id": thread_id}
            )

        self.logger.info(f"Started conversation {thread_id} for {owner_id}")
        return ConversationCreated(id=conversation.id, created_at=conversation.created_at)

    async def send_message(self, owner_id: str, conversation_id: str, text: str) -> MessageReply:
        """
        Send a user message and wait for the assistant's reply.

        Raises:
            NotFoundOrUnauthorized: no active conversation with this id for this owner
            RemoteThreadMissing: the remote thread could not be found
            RemoteUnavailable: the message could not be appended remotely
            GenerationFailed: the run produced no text; nothing was saved locally
            PersistenceError: the exchange could not be saved
        """
        owner_id = self._require_owner(owner_id)
        if not text or not text.strip():
            raise ValidationError("Message must not be empty")

        async with self._locks.hold(conversation_id):
            conversation = self._find_owned(owner_id, conversation_id)

            try:
                exists = await self.client.thread_exists(conversation_id)
            except RemoteUnavailable as e:
                raise RemoteThreadMissing(conversation_id, e.message) from e
            if not exists:
                raise RemoteThreadMissing(conversation_id)

            await self.client.append_message(conversation_id, USER_ROLE, text)
            conversation.messages.append(MessageDO(USER_ROLE, text, self._clock()))

            try:
                reply = await self.run_executor.execute(conversation_id, self.assistant_id)
            except GenerationFailed as e:
                # The remote thread keeps the user message; the local transcript does not.
                conversation.messages.pop()
                self.logger.error(f"Generation failed for {conversation_id}: {e.message}")
                raise

            now = self._clock()
            conversation.messages.append(MessageDO(ASSISTANT_ROLE, reply, now))
            conversation.updated_at = now
            self._save(conversation)

        return MessageReply(response=reply, conversation_id=conversation.id)

    async def list_conversations(self, owner_id: str) -> List[ConversationSummary]:
        """Active conversations of ``owner_id``, most recently updated first."""
        owner_id = self._require_owner(owner_id)
        rows = self.store.find_many(
            {"owner_id": owner_id, "is_active": True},
            fields=["id", "created_at", "updated_at"],
            order_by="-updated_at",
        )
        return [ConversationSummary(**row) for row in rows]

    async def get_history(self, owner_id: str, conversation_id: str) -> ConversationHistory:
        """Full transcript of an active conversation owned by ``owner_id``."""
        owner_id = self._require_owner(owner_id)
        conversation = self._find_owned(owner_id, conversation_id)
        return ConversationHistory(
            id=conversation.id,
            messages=conversation.messages,
            created_at=conversation.created_at,
            updated_at=conversation.updated_at,
        )

    async def end_conversation(self, owner_id: str, conversation_id: str) -> None:
        """
        Delete the remote thread and soft-delete the local record.

        The record is found regardless of its active flag, so a repeated call
        deletes remotely again. A remote failure is logged and ignored.
        """
        owner_id = self._require_owner(owner_id)

        async with self._locks.hold(conversation_id):
            conversation = self._find_owned(owner_id, conversation_id, active_only=False)

            try:
                if not await self.client.delete_thread(conversation_id):
                    self.logger.warning(f"Remote thread {conversation_id} was not deleted")
            except RemoteUnavailable as e:
                self.logger.warning(f"Error deleting remote thread {conversation_id}: {e.message}")

            conversation.is_active = False
            conversation.updated_at = self._clock()
            self._save(conversation)

        self.logger.info(f"Ended conversation {conversation_id} for {owner_id}")
