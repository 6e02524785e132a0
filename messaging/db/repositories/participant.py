"""Conversation participant repository for database operations."""

from datetime import datetime
from typing import Optional, List, Sequence
from .base import BaseRepository
from ..database_models.conversation import ParticipantDO


_COLUMNS = "conversation_id, user_id, role, last_read_at, joined_at"


def _row_to_participant(row) -> ParticipantDO:
    return ParticipantDO(
        conversation_id=row[0],
        user_id=row[1],
        role=row[2],
        last_read_at=row[3],
        joined_at=row[4]
    )


class ParticipantRepository(BaseRepository):
    """Repository for ConversationParticipant operations."""

    def add_many(self, participants: Sequence[ParticipantDO]) -> int:
        """
        Insert participant rows.

        Args:
            participants: ParticipantDO instances

        Returns:
            Number of rows inserted

        Raises:
            duckdb.Error: if any insert fails
        """
        self.conn.executemany(f"""
            INSERT INTO conversation_participants ({_COLUMNS})
            VALUES (?, ?, ?, ?, ?)
        """, [
            [p.conversation_id, p.user_id, p.role, p.last_read_at, p.joined_at]
            for p in participants
        ])
        return len(participants)

    def get(self, conversation_id: str, user_id: str) -> Optional[ParticipantDO]:
        result = self.conn.execute(f"""
            SELECT {_COLUMNS}
            FROM conversation_participants
            WHERE conversation_id = ? AND user_id = ?
        """, [conversation_id, user_id]).fetchone()

        return _row_to_participant(result) if result else None

    def list_by_user(self, user_id: str) -> List[ParticipantDO]:
        """
        List the participant rows of one user, one per conversation.

        Args:
            user_id: User ID

        Returns:
            List of ParticipantDO instances
        """
        results = self.conn.execute(f"""
            SELECT {_COLUMNS}
            FROM conversation_participants
            WHERE user_id = ?
        """, [user_id]).fetchall()

        return [_row_to_participant(row) for row in results]

    def list_by_conversations(self, conversation_ids: Sequence[str]) -> List[ParticipantDO]:
        """
        List every participant of the given conversations in one query.

        Args:
            conversation_ids: Conversation IDs

        Returns:
            List of ParticipantDO instances, ordered by join time
        """
        if not conversation_ids:
            return []

        results = self.conn.execute(f"""
            SELECT {_COLUMNS}
            FROM conversation_participants
            WHERE conversation_id IN ({self._placeholders(conversation_ids)})
            ORDER BY joined_at ASC, user_id ASC
        """, list(conversation_ids)).fetchall()

        return [_row_to_participant(row) for row in results]

    def mark_read(self, conversation_id: str, user_id: str, at: datetime) -> bool:
        """
        Set a participant's last-read timestamp.

        Args:
            conversation_id: Conversation ID
            user_id: Participant user ID
            at: New last-read timestamp

        Returns:
            True if a participant row was updated
        """
        results = self.conn.execute("""
            UPDATE conversation_participants
            SET last_read_at = ?
            WHERE conversation_id = ? AND user_id = ?
            RETURNING user_id
        """, [at, conversation_id, user_id]).fetchall()

        return len(results) > 0
