"""Store interface and shared repository helpers."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence, Tuple

import duckdb

from ..database_models.conversation import ConversationDO
from ...utils.logger import get_component_logger

# Columns usable in equality filters
FILTER_FIELDS = ("id", "owner_id", "is_active")

# Columns a caller may project or sort on
RECORD_FIELDS = ("id", "owner_id", "messages", "is_active", "created_at", "updated_at")


def parse_order_by(order_by: Optional[str]) -> Optional[Tuple[str, bool]]:
    """Split ``"-updated_at"`` into ``("updated_at", True)``."""
    if not order_by:
        return None
    descending = order_by.startswith("-")
    field_name = order_by[1:] if descending else order_by
    if field_name not in RECORD_FIELDS:
        raise ValueError(f"Cannot order by unknown field: {field_name}")
    return field_name, descending


def check_filters(filters: Dict[str, Any]) -> None:
    unknown = [name for name in filters if name not in FILTER_FIELDS]
    if unknown:
        raise ValueError(f"Cannot filter on unknown fields: {', '.join(unknown)}")


def check_fields(fields: Optional[Sequence[str]]) -> Tuple[str, ...]:
    if not fields:
        return RECORD_FIELDS
    unknown = [name for name in fields if name not in RECORD_FIELDS]
    if unknown:
        raise ValueError(f"Cannot project unknown fields: {', '.join(unknown)}")
    return tuple(fields)


class BaseConversationStore(ABC):
    """Interface for persisting conversation records.

    Writes report failure by returning False. Reads raise PersistenceError.
    Ownership is not checked here; callers pass ``owner_id`` as a filter.
    """

    @abstractmethod
    def insert(self, conversation: ConversationDO) -> bool:
        """Insert a new conversation record."""
        pass

    @abstractmethod
    def find_one(self, **filters: Any) -> Optional[ConversationDO]:
        """Return the first record matching every equality filter."""
        pass

    @abstractmethod
    def find_many(
        self,
        filters: Dict[str, Any],
        fields: Optional[Sequence[str]] = None,
        order_by: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """Return matching records projected to ``fields``.

        ``order_by`` names a field, prefixed with ``-`` for descending order.
        """
        pass

    @abstractmethod
    def save(self, conversation: ConversationDO) -> bool:
        """Overwrite the stored record with ``conversation``."""
        pass


class BaseRepository:
    """Base class for DuckDB-backed repositories."""

    def __init__(self, conn: duckdb.DuckDBPyConnection):
        """
        Initialize repository with database connection.

        Args:
            conn: DuckDB connection instance
        """
        self.conn = conn
        self.logger = get_component_logger("db")
