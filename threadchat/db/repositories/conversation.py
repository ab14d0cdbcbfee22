"""Conversation repository for database operations."""

import json
from typing import Any, Dict, List, Optional, Sequence

import duckdb

from .base import (
    BaseConversationStore,
    BaseRepository,
    check_fields,
    check_filters,
    parse_order_by,
)
from ..database_models.conversation import ConversationDO, MessageDO
from ...exceptions import PersistenceError


def _encode_messages(messages: List[MessageDO]) -> str:
    return json.dumps([m.to_dict() for m in messages], ensure_ascii=False)


def _decode_messages(raw: Optional[str]) -> List[MessageDO]:
    if not raw:
        return []
    return [MessageDO.from_dict(item) for item in json.loads(raw)]


class ConversationRepository(BaseRepository, BaseConversationStore):
    """DuckDB store for conversation records."""

    def _where(self, filters: Dict[str, Any]):
        check_filters(filters)
        if not filters:
            return "", []
        clauses = [f"{name} = ?" for name in filters]
        return "WHERE " + " AND ".join(clauses), list(filters.values())

    def insert(self, conversation: ConversationDO) -> bool:
        """
        Create a new conversation record.

        Args:
            conversation: ConversationDO instance

        Returns:
            True if successful, False otherwise
        """
        try:
            self.conn.execute("""
                INSERT INTO conversations (id, owner_id, messages, is_active, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)
            """, [
                conversation.id,
                conversation.owner_id,
                _encode_messages(conversation.messages),
                conversation.is_active,
                conversation.created_at,
                conversation.updated_at,
            ])
            self.conn.commit()
            self.logger.info(f"Created conversation record: {conversation.id}")
            return True
        except duckdb.Error as e:
            self.logger.error(f"Failed to create conversation {conversation.id}: {e}")
            return False

    def find_one(self, **filters: Any) -> Optional[ConversationDO]:
        """
        Get the first conversation matching the filters.

        Args:
            **filters: Equality filters on id, owner_id, is_active

        Returns:
            ConversationDO instance or None
        """
        where, params = self._where(filters)
        try:
            row = self.conn.execute(f"""
                SELECT id, owner_id, messages, is_active, created_at, updated_at
                FROM conversations
                {where}
                LIMIT 1
            """, params).fetchone()
        except duckdb.Error as e:
            self.logger.error(f"Failed to find conversation {filters}: {e}")
            raise PersistenceError("Failed to read conversation", {"filters": filters}) from e

        if row is None:
            return None
        return ConversationDO(
            id=row[0],
            owner_id=row[1],
            messages=_decode_messages(row[2]),
            is_active=row[3],
            created_at=row[4],
            updated_at=row[5],
        )

    def find_many(
        self,
        filters: Dict[str, Any],
        fields: Optional[Sequence[str]] = None,
        order_by: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """
        List conversations matching the filters.

        Args:
            filters: Equality filters on id, owner_id, is_active
            fields: Columns to return (all when omitted)
            order_by: Column to sort on, "-" prefix for descending

        Returns:
            List of dicts keyed by the projected field names
        """
        columns = check_fields(fields)
        where, params = self._where(filters)
        order = parse_order_by(order_by)
        order_sql = ""
        if order:
            order_sql = f"ORDER BY {order[0]} {'DESC' if order[1] else 'ASC'}"

        try:
            rows = self.conn.execute(f"""
                SELECT {', '.join(columns)}
                FROM conversations
                {where}
                {order_sql}
            """, params).fetchall()
        except duckdb.Error as e:
            self.logger.error(f"Failed to list conversations {filters}: {e}")
            raise PersistenceError("Failed to list conversations", {"filters": filters}) from e

        results = []
        for row in rows:
            record = dict(zip(columns, row))
            if "messages" in record:
                record["messages"] = _decode_messages(record["messages"])
            results.append(record)
        return results

    def save(self, conversation: ConversationDO) -> bool:
        """
        Overwrite the mutable columns of a conversation.

        owner_id and created_at are immutable and left as stored.

        Args:
            conversation: ConversationDO instance

        Returns:
            True if successful, False otherwise
        """
        try:
            self.conn.execute("""
                UPDATE conversations
                SET messages = ?, is_active = ?, updated_at = ?
                WHERE id = ?
            """, [
                _encode_messages(conversation.messages),
                conversation.is_active,
                conversation.updated_at,
                conversation.id,
            ])
            self.conn.commit()
            return True
        except duckdb.Error as e:
            self.logger.error(f"Failed to save conversation {conversation.id}: {e}")
            return False
