"""Conversation repository for database operations."""

from datetime import datetime
from typing import Optional, List, Sequence
from .base import BaseRepository
from ..database_models.conversation import ConversationDO, CONVERSATION_DIRECT


_COLUMNS = "id, type, title, created_by, created_at, last_message_at, last_message_preview"


def _row_to_conversation(row) -> ConversationDO:
    return ConversationDO(
        id=row[0],
        type=row[1],
        title=row[2],
        created_by=row[3],
        created_at=row[4],
        last_message_at=row[5],
        last_message_preview=row[6]
    )


class ConversationRepository(BaseRepository):
    """Repository for Conversation operations."""

    def create(self, conversation: ConversationDO) -> None:
        """
        Insert a new conversation record.

        Args:
            conversation: ConversationDO instance

        Raises:
            duckdb.Error: if the insert fails
        """
        self.conn.execute(f"""
            INSERT INTO conversations ({_COLUMNS})
            VALUES (?, ?, ?, ?, ?, ?, ?)
        """, [
            conversation.id,
            conversation.type,
            conversation.title,
            conversation.created_by,
            conversation.created_at,
            conversation.last_message_at,
            conversation.last_message_preview
        ])
        self.logger.info(f"Created {conversation.type} conversation: {conversation.id}")

    def list_by_ids(self, conversation_ids: Sequence[str]) -> List[ConversationDO]:
        """
        Get conversations by ID, most recent activity first.

        Args:
            conversation_ids: Conversation IDs to fetch

        Returns:
            List of ConversationDO ordered by last_message_at DESC
        """
        if not conversation_ids:
            return []

        results = self.conn.execute(f"""
            SELECT {_COLUMNS}
            FROM conversations
            WHERE id IN ({self._placeholders(conversation_ids)})
            ORDER BY last_message_at DESC
        """, list(conversation_ids)).fetchall()

        return [_row_to_conversation(row) for row in results]

    def find_direct_between(self, user_a: str, user_b: str) -> Optional[ConversationDO]:
        """
        Find an existing direct conversation whose members include both users.

        Args:
            user_a: First user ID
            user_b: Second user ID

        Returns:
            The oldest matching ConversationDO, or None
        """
        result = self.conn.execute("""
            SELECT c.id, c.type, c.title, c.created_by, c.created_at, c.last_message_at, c.last_message_preview
            FROM conversations c
            JOIN conversation_participants pa
                ON pa.conversation_id = c.id AND pa.user_id = ?
            JOIN conversation_participants pb
                ON pb.conversation_id = c.id AND pb.user_id = ?
            WHERE c.type = ?
            ORDER BY c.created_at ASC
            LIMIT 1
        """, [user_a, user_b, CONVERSATION_DIRECT]).fetchone()

        return _row_to_conversation(result) if result else None

    def touch_last_message(self, conversation_id: str, at: datetime, preview: Optional[str]) -> None:
        """
        Record the most recent message on the conversation row.

        Args:
            conversation_id: Conversation ID
            at: Timestamp of the newest message
            preview: Preview text of the newest message
        """
        self.conn.execute("""
            UPDATE conversations
            SET last_message_at = ?, last_message_preview = ?
            WHERE id = ?
        """, [at, preview, conversation_id])
