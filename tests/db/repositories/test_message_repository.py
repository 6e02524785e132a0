"""Tests for MessageRepository."""

import pytest
from datetime import datetime, timedelta

from messaging.db.repositories.message import MessageRepository
from messaging.db.database_models.message import MessageDO


T0 = datetime(2025, 1, 1, 12, 0, 0)


@pytest.fixture
def repo(db_conn):
    """Provide a MessageRepository."""
    return MessageRepository(db_conn.conn)


def _make_message(**overrides):
    """Factory for MessageDO with sensible defaults."""
    defaults = dict(id="m1", conversation_id="c1", sender_id="alice", content="hello", created_at=T0)
    defaults.update(overrides)
    return MessageDO(**defaults)


def _at(seconds):
    return T0 + timedelta(seconds=seconds)


class TestMessageRepository:
    """Tests for MessageRepository."""

    class TestAdd:
        """SUT: MessageRepository.add"""

        def test_returns_id(self, repo):
            """add() should return the message id."""
            assert repo.add(_make_message()) == "m1"

        def test_fields_persisted(self, repo):
            """Every column should round-trip."""
            repo.add(_make_message(
                message_type="shared_post",
                media_url="https://cdn.example.com/p.png",
                shared_content_id="post-1",
                shared_content_type="post",
            ))
            result = repo.list_page("c1", 10)[0]
            assert result.content == "hello"
            assert result.message_type == "shared_post"
            assert result.media_url == "https://cdn.example.com/p.png"
            assert result.shared_content_id == "post-1"
            assert result.shared_content_type == "post"
            assert result.is_edited is False
            assert result.is_deleted is False
            assert result.created_at == T0

        def test_null_sender(self, repo):
            """System messages have no sender."""
            repo.add(_make_message(sender_id=None))
            assert repo.list_page("c1", 10)[0].sender_id is None

    class TestListPage:
        """SUT: MessageRepository.list_page"""

        def test_newest_first(self, repo):
            """Rows should be ordered by created_at DESC."""
            for i in range(3):
                repo.add(_make_message(id=f"m{i}", created_at=_at(i)))
            assert [m.id for m in repo.list_page("c1", 10)] == ["m2", "m1", "m0"]

        def test_limit(self, repo):
            """No more than limit rows should be returned."""
            for i in range(5):
                repo.add(_make_message(id=f"m{i}", created_at=_at(i)))
            assert [m.id for m in repo.list_page("c1", 2)] == ["m4", "m3"]

        def test_before_is_strict(self, repo):
            """Only messages strictly older than the cursor should be returned."""
            for i in range(5):
                repo.add(_make_message(id=f"m{i}", created_at=_at(i)))
            assert [m.id for m in repo.list_page("c1", 10, before=_at(2))] == ["m1", "m0"]

        def test_ties_ordered_by_id(self, repo):
            """Rows sharing a timestamp should come out by id DESC."""
            for message_id in ("m1", "m3", "m2"):
                repo.add(_make_message(id=message_id, created_at=T0))
            assert [m.id for m in repo.list_page("c1", 10)] == ["m3", "m2", "m1"]

        def test_before_id_resumes_inside_tie(self, repo):
            """With before_id, the rest of a timestamp tie should still be returned."""
            repo.add(_make_message(id="m0", created_at=_at(-1)))
            for message_id in ("m1", "m2", "m3"):
                repo.add(_make_message(id=message_id, created_at=T0))
            repo.add(_make_message(id="m4", created_at=_at(1)))
            page = repo.list_page("c1", 10, before=T0, before_id="m3")
            assert [m.id for m in page] == ["m2", "m1", "m0"]

        def test_scoped_to_conversation(self, repo):
            """Messages of other conversations should be excluded."""
            repo.add(_make_message(id="m1", conversation_id="c1"))
            repo.add(_make_message(id="m2", conversation_id="c2"))
            assert [m.id for m in repo.list_page("c1", 10)] == ["m1"]

    class TestCountByConversation:
        """SUT: MessageRepository.count_by_conversation"""

        def test_count(self, repo):
            repo.add(_make_message(id="m1"))
            repo.add(_make_message(id="m2"))
            repo.add(_make_message(id="m3", conversation_id="c2"))
            assert repo.count_by_conversation("c1") == 2
            assert repo.count_by_conversation("none") == 0

    class TestUnreadCounts:
        """SUT: MessageRepository.unread_counts"""

        def test_counts_messages_after_last_read(self, seed, repo):
            """Messages from others after last_read_at are unread."""
            conv = seed.conversation(["alice", "bob"], last_read_at=T0)
            seed.message(conv.id, "bob", "one", _at(1))
            seed.message(conv.id, "bob", "two", _at(2))
            assert repo.unread_counts("alice") == {conv.id: 2}

        def test_own_messages_excluded(self, seed, repo):
            """The viewer's own messages never count as unread."""
            conv = seed.conversation(["alice", "bob"], last_read_at=T0)
            seed.message(conv.id, "alice", "mine", _at(1))
            seed.message(conv.id, "bob", "theirs", _at(2))
            assert repo.unread_counts("alice") == {conv.id: 1}
            assert repo.unread_counts("bob") == {conv.id: 1}

        def test_boundary_is_strict(self, seed, repo):
            """A message stamped exactly at last_read_at is read."""
            conv = seed.conversation(["alice", "bob"], last_read_at=_at(5))
            seed.message(conv.id, "bob", "at marker", _at(5))
            seed.message(conv.id, "bob", "before marker", _at(4))
            assert repo.unread_counts("alice") == {}

        def test_deleted_excluded(self, seed, repo):
            """Deleted messages are not unread."""
            conv = seed.conversation(["alice", "bob"], last_read_at=T0)
            repo.add(_make_message(id="gone", conversation_id=conv.id, sender_id="bob",
                                   created_at=_at(1), is_deleted=True))
            assert repo.unread_counts("alice") == {}

        def test_null_last_read_omitted(self, seed, repo):
            """Without a last-read marker the conversation is left out."""
            conv = seed.conversation(["alice", "bob"], last_read_at=None)
            seed.message(conv.id, "bob", "hi", _at(1))
            assert repo.unread_counts("alice") == {}

        def test_across_conversations(self, seed, repo):
            """One aggregate should cover every conversation of the viewer."""
            c1 = seed.conversation(["alice", "bob"], last_read_at=T0)
            c2 = seed.conversation(["alice", "carol", "dave"], last_read_at=T0)
            seed.message(c1.id, "bob", "hi", _at(1))
            seed.message(c2.id, "carol", "hey", _at(1))
            seed.message(c2.id, "dave", "yo", _at(2))
            assert repo.unread_counts("alice") == {c1.id: 1, c2.id: 2}
