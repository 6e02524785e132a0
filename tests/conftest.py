"""Shared fixtures: a fresh DuckDB per test and helpers to seed rows."""

import uuid
from datetime import datetime, timedelta
from typing import List, Optional

import pytest

from messaging.config import Settings
from messaging.db import (
    DatabaseConnection,
    ConversationRepository,
    ParticipantRepository,
    MessageRepository,
    ProfileRepository,
)
from messaging.db.database_models import ConversationDO, ParticipantDO, MessageDO, ProfileDO


BASE_TIME = datetime(2025, 1, 1, 12, 0, 0)


@pytest.fixture
def db_conn(tmp_path):
    """Provide a fresh database connection."""
    db = DatabaseConnection(str(tmp_path / "test.db"))
    yield db
    db.close()


@pytest.fixture
def test_settings(tmp_path):
    """Settings pointing at the per-test database."""
    return Settings(
        database_path=str(tmp_path / "test.db"),
        log_level="WARNING",
        log_file=str(tmp_path / "app.log"),
        _env_file=None
    )


class Seeder:
    """Writes rows directly through the repositories with explicit timestamps."""

    def __init__(self, db: DatabaseConnection):
        self.conversations = ConversationRepository(db.conn)
        self.participants = ParticipantRepository(db.conn)
        self.messages = MessageRepository(db.conn)
        self.profiles = ProfileRepository(db.conn)

    def profile(self, user_id: str, display_name: Optional[str] = None, handle: Optional[str] = None) -> ProfileDO:
        profile = ProfileDO(
            user_id=user_id,
            display_name=display_name or user_id.title(),
            avatar_url=f"https://cdn.example.com/{user_id}.png",
            handle=handle or user_id
        )
        self.profiles.upsert(profile)
        return profile

    def conversation(
        self,
        members: List[str],
        conv_type: Optional[str] = None,
        at: datetime = BASE_TIME,
        conversation_id: Optional[str] = None,
        last_read_at: Optional[datetime] = BASE_TIME,
    ) -> ConversationDO:
        conversation = ConversationDO(
            id=conversation_id or str(uuid.uuid4()),
            type=conv_type or ("direct" if len(members) == 2 else "group"),
            created_by=members[0],
            created_at=at,
            last_message_at=at
        )
        self.conversations.create(conversation)
        self.participants.add_many([
            ParticipantDO(
                conversation_id=conversation.id,
                user_id=uid,
                role="admin" if i == 0 else "member",
                last_read_at=last_read_at,
                joined_at=at
            )
            for i, uid in enumerate(members)
        ])
        return conversation

    def message(
        self,
        conversation_id: str,
        sender_id: Optional[str],
        content: str,
        at: datetime,
    ) -> MessageDO:
        message = MessageDO(
            id=str(uuid.uuid4()),
            conversation_id=conversation_id,
            sender_id=sender_id,
            content=content,
            created_at=at
        )
        self.messages.add(message)
        self.conversations.touch_last_message(conversation_id, at, content)
        return message

    def messages_series(self, conversation_id: str, sender_id: str, count: int,
                        start: datetime = BASE_TIME) -> List[MessageDO]:
        """Insert count messages one second apart, oldest first."""
        return [
            self.message(conversation_id, sender_id, f"msg {i}", start + timedelta(seconds=i + 1))
            for i in range(count)
        ]


@pytest.fixture
def seed(db_conn):
    """Provide a Seeder bound to the test database."""
    return Seeder(db_conn)
