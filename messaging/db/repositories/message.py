"""Message repository for database operations."""

from datetime import datetime
from typing import Dict, Optional, List
from .base import BaseRepository
from ..database_models.message import MessageDO


_COLUMNS = (
    "id, conversation_id, sender_id, content, message_type, media_url, "
    "shared_content_id, shared_content_type, is_edited, is_deleted, created_at"
)


def _row_to_message(row) -> MessageDO:
    return MessageDO(
        id=row[0],
        conversation_id=row[1],
        sender_id=row[2],
        content=row[3],
        message_type=row[4],
        media_url=row[5],
        shared_content_id=row[6],
        shared_content_type=row[7],
        is_edited=bool(row[8]),
        is_deleted=bool(row[9]),
        created_at=row[10]
    )


class MessageRepository(BaseRepository):
    """Repository for Message operations."""

    def add(self, message: MessageDO) -> str:
        """
        Insert a new message.

        Args:
            message: MessageDO instance

        Returns:
            The message ID

        Raises:
            duckdb.Error: if the insert fails
        """
        self.conn.execute(f"""
            INSERT INTO messages ({_COLUMNS})
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """, [
            message.id,
            message.conversation_id,
            message.sender_id,
            message.content,
            message.message_type,
            message.media_url,
            message.shared_content_id,
            message.shared_content_type,
            message.is_edited,
            message.is_deleted,
            message.created_at
        ])
        self.logger.debug(f"Added message {message.id} to conversation {message.conversation_id}")
        return message.id

    def list_page(
        self,
        conversation_id: str,
        limit: int,
        before: Optional[datetime] = None,
        before_id: Optional[str] = None
    ) -> List[MessageDO]:
        """
        Get one page of messages, newest first.

        Rows sharing a created_at are ordered by id, so (created_at, id) is a
        total order and a page boundary never falls inside a tie.

        Args:
            conversation_id: Conversation ID
            limit: Maximum number of rows to return
            before: Only return messages created strictly before this timestamp,
                or at it with an id below before_id when that is given
            before_id: ID of the last message already seen at before

        Returns:
            List of MessageDO instances ordered by created_at DESC, id DESC
        """
        params = [conversation_id]
        where = "conversation_id = ?"
        if before is not None and before_id is not None:
            where += " AND (created_at < ? OR (created_at = ? AND id < ?))"
            params.extend([before, before, before_id])
        elif before is not None:
            where += " AND created_at < ?"
            params.append(before)
        params.append(limit)

        results = self.conn.execute(f"""
            SELECT {_COLUMNS}
            FROM messages
            WHERE {where}
            ORDER BY created_at DESC, id DESC
            LIMIT ?
        """, params).fetchall()

        return [_row_to_message(row) for row in results]

    def count_by_conversation(self, conversation_id: str) -> int:
        result = self.conn.execute("""
            SELECT COUNT(*) FROM messages WHERE conversation_id = ?
        """, [conversation_id]).fetchone()
        return result[0] if result else 0

    def unread_counts(self, user_id: str) -> Dict[str, int]:
        """
        Aggregate unread messages per conversation for one viewer.

        A message is unread when it was created strictly after the viewer's
        last_read_at and was not sent by the viewer. Conversations where the
        viewer has no last_read_at, or nothing unread, are omitted.

        Args:
            user_id: Viewer user ID

        Returns:
            Mapping of conversation ID to unread count
        """
        results = self.conn.execute("""
            SELECT p.conversation_id, COUNT(m.id)
            FROM conversation_participants p
            JOIN messages m ON m.conversation_id = p.conversation_id
            WHERE p.user_id = ?
              AND p.last_read_at IS NOT NULL
              AND m.created_at > p.last_read_at
              AND (m.sender_id IS NULL OR m.sender_id <> ?)
              AND NOT m.is_deleted
            GROUP BY p.conversation_id
        """, [user_id, user_id]).fetchall()

        return {row[0]: int(row[1]) for row in results}
