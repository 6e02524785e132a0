"""Cursor pagination over a conversation's messages."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Tuple, Union

from ..db.database_models.message import MessageDO
from ..db.repositories.message import MessageRepository
from ..exceptions import InvalidCursorError
from ..models.message import MessageResponse, SenderSummary
from ..models.profile import ProfileSummary
from ..utils.logger import get_app_logger
from ..utils.timeutil import format_cursor, parse_cursor
from .profile_resolver import ProfileResolver
from .query_cache import QueryCache, messages_key


DEFAULT_PAGE_SIZE = 30


@dataclass(frozen=True)
class Page:
    """A non-empty page; next_cursor is None on the last page."""

    items: List[MessageResponse] = field(default_factory=list)
    next_cursor: Optional[str] = None


@dataclass(frozen=True)
class Exhausted:
    """No messages at or beyond the cursor."""


@dataclass(frozen=True)
class Failed:
    """The page could not be read; the caller may retry."""

    reason: str


PageResult = Union[Page, Exhausted, Failed]


def encode_cursor(message: MessageDO) -> str:
    """Cursor pointing just past message: its created_at and id joined by '|'."""
    return f"{format_cursor(message.created_at)}|{message.id}"


def decode_cursor(cursor: str) -> Tuple[datetime, Optional[str]]:
    """
    Split a cursor into its timestamp and message id.

    A bare timestamp is accepted and yields no id.

    Raises:
        ValueError: if the timestamp part does not parse
    """
    stamp, sep, message_id = cursor.partition("|")
    if sep and not message_id:
        raise ValueError(f"Cursor has an empty message id: {cursor!r}")
    return parse_cursor(stamp), (message_id or None)


def message_to_response(
    message: MessageDO,
    profiles: Optional[Dict[str, ProfileSummary]] = None
) -> MessageResponse:
    """Build the API view of a message, attaching its sender when known."""
    sender = None
    profile = (profiles or {}).get(message.sender_id) if message.sender_id else None
    if profile is not None:
        sender = SenderSummary(display_name=profile.display_name, avatar_url=profile.avatar_url)

    return MessageResponse(
        id=message.id,
        conversation_id=message.conversation_id,
        sender_id=message.sender_id,
        content=message.content,
        message_type=message.message_type,
        media_url=message.media_url,
        shared_content_id=message.shared_content_id,
        shared_content_type=message.shared_content_type,
        is_edited=message.is_edited,
        is_deleted=message.is_deleted,
        created_at=message.created_at,
        sender=sender
    )


class MessagePager:
    """
    Reads one conversation newest-first in fixed-size pages.

    The cursor names the last message of the previous page by created_at
    and id; the next page holds the messages after it in (created_at, id)
    descending order, so messages sharing a timestamp are never skipped.

    With lookahead enabled the pager asks for one row more than the page
    size and only hands out a cursor when that row exists, so the last page
    is detected even when it is exactly full. Without lookahead a full page
    always carries a cursor and the following fetch comes back Exhausted.
    """

    def __init__(
        self,
        messages: MessageRepository,
        profiles: ProfileResolver,
        page_size: int = DEFAULT_PAGE_SIZE,
        lookahead: bool = True,
        cache: Optional[QueryCache] = None
    ):
        self.messages = messages
        self.profiles = profiles
        self.page_size = page_size
        self.lookahead = lookahead
        self.cache = cache
        self.logger = get_app_logger()

    async def list_messages(self, conversation_id: str, cursor: Optional[str] = None) -> PageResult:
        """
        Fetch one page of messages.

        Args:
            conversation_id: Conversation ID
            cursor: next_cursor from the previous page, None for the newest page

        Returns:
            Page, Exhausted or Failed

        Raises:
            InvalidCursorError: if cursor cannot be decoded
        """
        before, before_id = None, None
        if cursor:
            try:
                before, before_id = decode_cursor(cursor)
            except ValueError:
                raise InvalidCursorError(cursor) from None

        if self.cache is None:
            return await self._fetch(conversation_id, before, before_id)

        return await self.cache.get_or_fetch(
            messages_key(conversation_id, cursor),
            lambda: self._fetch(conversation_id, before, before_id),
            cache_if=lambda result: not isinstance(result, Failed)
        )

    async def _fetch(
        self,
        conversation_id: str,
        before: Optional[datetime],
        before_id: Optional[str] = None
    ) -> PageResult:
        limit = self.page_size + 1 if self.lookahead else self.page_size

        try:
            rows = self.messages.list_page(conversation_id, limit, before, before_id)
        except Exception as e:
            self.logger.error(f"Failed to read messages for conversation {conversation_id}: {e}")
            return Failed(reason=str(e))

        if not rows:
            return Exhausted()

        if self.lookahead:
            has_more = len(rows) > self.page_size
            rows = rows[:self.page_size]
        else:
            has_more = len(rows) == self.page_size

        # Only the senders on this page
        try:
            profiles = await self.profiles.resolve(row.sender_id for row in rows)
        except Exception as e:
            self.logger.error(f"Failed to resolve senders for conversation {conversation_id}: {e}")
            return Failed(reason=str(e))

        return Page(
            items=[message_to_response(row, profiles) for row in rows],
            next_cursor=encode_cursor(rows[-1]) if has_more else None
        )
