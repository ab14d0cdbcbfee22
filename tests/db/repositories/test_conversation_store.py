"""Tests for the conversation stores (DuckDB and in-memory)."""

import pytest
from datetime import datetime, timedelta

from threadchat.db.connection import DatabaseConnection
from threadchat.db.database_models.conversation import ConversationDO, MessageDO
from threadchat.db.repositories.conversation import ConversationRepository
from threadchat.db.repositories.memory import InMemoryConversationStore

NOW = datetime(2025, 1, 15, 10, 30, 0)


@pytest.fixture(params=["duckdb", "memory"])
def repo(request, tmp_path):
    """Provide each store implementation in turn."""
    if request.param == "memory":
        yield InMemoryConversationStore()
        return
    db = DatabaseConnection(str(tmp_path / "test.db"))
    yield ConversationRepository(db.conn)
    db.close()


def _make_conv(**overrides):
    """Factory for ConversationDO with sensible defaults."""
    defaults = dict(id="thread_1", owner_id="0xABC", created_at=NOW, updated_at=NOW)
    defaults.update(overrides)
    return ConversationDO(**defaults)


class TestInsert:
    """SUT: insert"""

    def test_returns_true(self, repo):
        assert repo.insert(_make_conv()) is True

    def test_fields_persisted(self, repo):
        """Inserted conversation should be retrievable with all fields."""
        messages = [
            MessageDO("user", "hello", NOW),
            MessageDO("assistant", "hi there", NOW + timedelta(seconds=1)),
        ]
        repo.insert(_make_conv(messages=messages))

        result = repo.find_one(id="thread_1")
        assert result.id == "thread_1"
        assert result.owner_id == "0xABC"
        assert result.is_active is True
        assert result.created_at == NOW
        assert result.updated_at == NOW
        assert result.messages == messages

    def test_duplicate_id(self, repo):
        """A second insert with the same id should fail."""
        repo.insert(_make_conv())
        assert repo.insert(_make_conv(owner_id="0xDEF")) is False
        assert repo.find_one(id="thread_1").owner_id == "0xABC"

    def test_unicode_content(self, repo):
        repo.insert(_make_conv(messages=[MessageDO("user", "héllo 你好 'quoted'", NOW)]))
        assert repo.find_one(id="thread_1").messages[0].content == "héllo 你好 'quoted'"


class TestFindOne:
    """SUT: find_one"""

    def test_not_found(self, repo):
        assert repo.find_one(id="missing") is None

    def test_all_filters_must_match(self, repo):
        repo.insert(_make_conv())
        assert repo.find_one(id="thread_1", owner_id="0xABC", is_active=True) is not None
        assert repo.find_one(id="thread_1", owner_id="0xDEF") is None
        assert repo.find_one(id="thread_1", is_active=False) is None

    def test_unknown_filter(self, repo):
        with pytest.raises(ValueError):
            repo.find_one(title="x")

    def test_returns_a_copy(self, repo):
        """Mutating a found record should not change the stored one."""
        repo.insert(_make_conv())
        found = repo.find_one(id="thread_1")
        found.messages.append(MessageDO("user", "unsaved", NOW))
        assert repo.find_one(id="thread_1").messages == []


class TestFindMany:
    """SUT: find_many"""

    def test_filters(self, repo):
        repo.insert(_make_conv(id="t1"))
        repo.insert(_make_conv(id="t2", owner_id="0xDEF"))
        repo.insert(_make_conv(id="t3", is_active=False))

        results = repo.find_many({"owner_id": "0xABC", "is_active": True})
        assert [r["id"] for r in results] == ["t1"]

    def test_projection(self, repo):
        repo.insert(_make_conv())
        (row,) = repo.find_many({}, fields=["id", "created_at", "updated_at"])
        assert row == {"id": "thread_1", "created_at": NOW, "updated_at": NOW}

    def test_all_fields_by_default(self, repo):
        repo.insert(_make_conv(messages=[MessageDO("user", "hello", NOW)]))
        (row,) = repo.find_many({})
        assert set(row) == {"id", "owner_id", "messages", "is_active", "created_at", "updated_at"}
        assert row["messages"][0].content == "hello"

    def test_ordered_by_updated_at_desc(self, repo):
        repo.insert(_make_conv(id="old", updated_at=NOW - timedelta(hours=1)))
        repo.insert(_make_conv(id="new", updated_at=NOW))
        repo.insert(_make_conv(id="mid", updated_at=NOW - timedelta(minutes=30)))

        results = repo.find_many({}, fields=["id"], order_by="-updated_at")
        assert [r["id"] for r in results] == ["new", "mid", "old"]

    def test_ordered_ascending(self, repo):
        repo.insert(_make_conv(id="b", created_at=NOW))
        repo.insert(_make_conv(id="a", created_at=NOW - timedelta(hours=1)))

        results = repo.find_many({}, fields=["id"], order_by="created_at")
        assert [r["id"] for r in results] == ["a", "b"]

    def test_unknown_field(self, repo):
        with pytest.raises(ValueError):
            repo.find_many({}, fields=["title"])
        with pytest.raises(ValueError):
            repo.find_many({}, order_by="-title")


class TestSave:
    """SUT: save"""

    def test_overwrites_record(self, repo):
        repo.insert(_make_conv())
        conv = repo.find_one(id="thread_1")
        conv.messages.append(MessageDO("user", "hello", NOW))
        conv.is_active = False
        conv.updated_at = NOW + timedelta(minutes=5)

        assert repo.save(conv) is True

        result = repo.find_one(id="thread_1")
        assert [m.content for m in result.messages] == ["hello"]
        assert result.is_active is False
        assert result.updated_at == NOW + timedelta(minutes=5)

    def test_owner_and_created_at_are_immutable(self, repo):
        repo.insert(_make_conv())
        conv = repo.find_one(id="thread_1")
        conv.owner_id = "0xDEF"
        conv.created_at = NOW + timedelta(days=1)
        repo.save(conv)

        result = repo.find_one(id="thread_1")
        assert result.owner_id == "0xABC"
        assert result.created_at == NOW

    def test_last_write_wins(self, repo):
        """Two copies saved in turn: the second overwrites the first."""
        repo.insert(_make_conv())
        first = repo.find_one(id="thread_1")
        second = repo.find_one(id="thread_1")
        first.messages.append(MessageDO("user", "from first", NOW))
        second.messages.append(MessageDO("user", "from second", NOW))

        repo.save(first)
        repo.save(second)

        assert [m.content for m in repo.find_one(id="thread_1").messages] == ["from second"]


class TestInMemoryOnly:
    """Behaviour specific to InMemoryConversationStore."""

    def test_save_unknown_record(self):
        assert InMemoryConversationStore().save(_make_conv()) is False


class TestMessageRecord:
    """SUT: MessageDO.from_dict"""

    def test_parses_iso_timestamp(self):
        msg = MessageDO.from_dict({"role": "user", "content": "hello", "created_at": NOW.isoformat()})
        assert msg == MessageDO("user", "hello", NOW)

    @pytest.mark.parametrize("missing", ["role", "content", "created_at"])
    def test_missing_key(self, missing):
        data = {"role": "user", "content": "hello", "created_at": NOW.isoformat()}
        del data[missing]
        with pytest.raises(KeyError):
            MessageDO.from_dict(data)

    def test_stored_message_without_timestamp(self, tmp_path):
        """A stored entry with no timestamp is rejected, not given a fresh one."""
        db = DatabaseConnection(str(tmp_path / "test.db"))
        repo = ConversationRepository(db.conn)
        repo.insert(_make_conv())
        db.conn.execute(
            "UPDATE conversations SET messages = ? WHERE id = ?",
            ['[{"role": "user", "content": "hello"}]', "thread_1"]
        )

        with pytest.raises(KeyError):
            repo.find_one(id="thread_1")
        db.close()
