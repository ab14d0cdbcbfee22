"""In-memory conversation store."""

import copy
from typing import Any, Dict, List, Optional, Sequence

from .base import BaseConversationStore, check_fields, check_filters, parse_order_by
from ..database_models.conversation import ConversationDO
from ...utils.logger import get_component_logger


class InMemoryConversationStore(BaseConversationStore):
    """Keeps conversation records in a dictionary.

    Records are deep-copied on the way in and out, so callers never share
    state with the store, matching the row semantics of the DuckDB store.
    """

    def __init__(self):
        self._records: Dict[str, ConversationDO] = {}
        self.logger = get_component_logger("store")

    @staticmethod
    def _matches(record: ConversationDO, filters: Dict[str, Any]) -> bool:
        return all(getattr(record, name) == value for name, value in filters.items())

    def insert(self, conversation: ConversationDO) -> bool:
        if conversation.id in self._records:
            self.logger.error(f"Failed to create conversation {conversation.id}: duplicate id")
            return False
        self._records[conversation.id] = copy.deepcopy(conversation)
        return True

    def find_one(self, **filters: Any) -> Optional[ConversationDO]:
        check_filters(filters)
        for record in self._records.values():
            if self._matches(record, filters):
                return copy.deepcopy(record)
        return None

    def find_many(
        self,
        filters: Dict[str, Any],
        fields: Optional[Sequence[str]] = None,
        order_by: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        check_filters(filters)
        columns = check_fields(fields)
        records = [r for r in self._records.values() if self._matches(r, filters)]

        order = parse_order_by(order_by)
        if order:
            records.sort(key=lambda r: getattr(r, order[0]), reverse=order[1])

        return [
            {name: copy.deepcopy(getattr(record, name)) for name in columns}
            for record in records
        ]

    def save(self, conversation: ConversationDO) -> bool:
        stored = self._records.get(conversation.id)
        if stored is None:
            self.logger.error(f"Failed to save conversation {conversation.id}: not found")
            return False
        updated = copy.deepcopy(conversation)
        updated.owner_id = stored.owner_id
        updated.created_at = stored.created_at
        self._records[conversation.id] = updated
        return True
