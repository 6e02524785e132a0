"""Write operations: send, create conversation, mark read."""

import uuid
from dataclasses import dataclass
from typing import Iterable, Optional

from ..db.connection import DatabaseConnection
from ..db.database_models.conversation import (
    ConversationDO,
    ParticipantDO,
    CONVERSATION_DIRECT,
    CONVERSATION_GROUP,
    ROLE_ADMIN,
    ROLE_MEMBER,
)
from ..db.database_models.message import MessageDO
from ..db.repositories.conversation import ConversationRepository
from ..db.repositories.message import MessageRepository
from ..db.repositories.participant import ParticipantRepository
from ..exceptions import (
    ConversationCreateError,
    EmptyMessageError,
    InvalidParticipantsError,
    NotAuthenticatedError,
    NotParticipantError,
)
from ..models.message import MessageResponse
from ..utils.logger import get_app_logger
from ..utils.timeutil import utcnow
from .message_pager import message_to_response
from .query_cache import QueryCache, CONVERSATIONS_TAG, messages_tag
from .realtime import MessageInserted, RealtimeHub


@dataclass
class CreateConversationResult:
    """Outcome of create_conversation."""

    conversation: ConversationDO
    created: bool


class MessagingMutations:
    """
    Mutations against the messaging tables.

    Each write runs in one transaction, then invalidates the affected cache
    entries and announces inserted messages on the realtime hub.
    """

    def __init__(
        self,
        db: DatabaseConnection,
        cache: QueryCache,
        hub: Optional[RealtimeHub] = None,
        preview_length: int = 200
    ):
        self.db = db
        self.cache = cache
        self.hub = hub
        self.preview_length = preview_length
        self.conversations = ConversationRepository(db.conn)
        self.participants = ParticipantRepository(db.conn)
        self.messages = MessageRepository(db.conn)
        self.logger = get_app_logger()

    def _preview(self, content: Optional[str]) -> Optional[str]:
        if not content:
            return None
        return content[:self.preview_length]

    def _insert_message(self, message: MessageDO) -> None:
        self.messages.add(message)
        self.conversations.touch_last_message(
            message.conversation_id, message.created_at, self._preview(message.content)
        )

    async def _announce(self, message: MessageDO) -> None:
        if self.hub is None:
            return
        await self.hub.publish(MessageInserted(
            message_id=message.id,
            conversation_id=message.conversation_id,
            sender_id=message.sender_id,
            created_at=message.created_at
        ))

    async def send_message(
        self,
        actor_id: Optional[str],
        conversation_id: str,
        content: Optional[str],
        message_type: str = "text",
        media_url: Optional[str] = None,
        shared_content_id: Optional[str] = None,
        shared_content_type: Optional[str] = None
    ) -> MessageResponse:
        """
        Post a message to a conversation the actor belongs to.

        Args:
            actor_id: Current user
            conversation_id: Target conversation
            content: Message text, trimmed before storing
            message_type: Type tag, "text" by default
            media_url: Optional attached media
            shared_content_id: Optional shared post/recipe ID
            shared_content_type: Kind of the shared content

        Returns:
            The stored message

        Raises:
            NotAuthenticatedError: no actor
            NotParticipantError: actor is not a member of the conversation
            EmptyMessageError: no text, media or shared content
            duckdb.Error: store failures, unmodified
        """
        if not actor_id:
            raise NotAuthenticatedError()

        if self.participants.get(conversation_id, actor_id) is None:
            raise NotParticipantError(conversation_id, actor_id)

        text = (content or "").strip()
        if not text and not media_url and not shared_content_id:
            raise EmptyMessageError()

        message = MessageDO(
            id=str(uuid.uuid4()),
            conversation_id=conversation_id,
            sender_id=actor_id,
            content=text,
            message_type=message_type or "text",
            media_url=media_url,
            shared_content_id=shared_content_id,
            shared_content_type=shared_content_type,
            created_at=utcnow()
        )

        with self.db.transaction():
            self._insert_message(message)

        self.cache.invalidate(messages_tag(conversation_id))
        self.cache.invalidate(CONVERSATIONS_TAG)
        await self._announce(message)

        return message_to_response(message)

    async def create_conversation(
        self,
        actor_id: Optional[str],
        participant_ids: Iterable[str],
        initial_message: Optional[str] = None,
        title: Optional[str] = None
    ) -> CreateConversationResult:
        """
        Open a conversation with the given users, reusing an existing direct one.

        With exactly one other user, an existing direct conversation between
        the two is returned untouched and the initial message is dropped.
        Otherwise the conversation, its members and the optional first
        message are written in one transaction.

        Args:
            actor_id: Current user, becomes the admin
            participant_ids: Other members; duplicates and the actor are ignored
            initial_message: Optional first message
            title: Optional title

        Returns:
            CreateConversationResult

        Raises:
            NotAuthenticatedError: no actor
            InvalidParticipantsError: nobody besides the actor
            ConversationCreateError: the write failed and was rolled back
        """
        if not actor_id:
            raise NotAuthenticatedError()

        members = list(dict.fromkeys(uid for uid in [actor_id, *participant_ids] if uid))
        if len(members) < 2:
            raise InvalidParticipantsError("A conversation needs at least one other participant")

        is_direct = len(members) == 2
        text = (initial_message or "").strip()
        message: Optional[MessageDO] = None

        try:
            with self.db.transaction():
                if is_direct:
                    existing = self.conversations.find_direct_between(actor_id, members[1])
                    if existing is not None:
                        self.logger.info(f"Reusing direct conversation {existing.id}")
                        return CreateConversationResult(conversation=existing, created=False)

                now = utcnow()
                conversation = ConversationDO(
                    id=str(uuid.uuid4()),
                    type=CONVERSATION_DIRECT if is_direct else CONVERSATION_GROUP,
                    title=title,
                    created_by=actor_id,
                    created_at=now,
                    last_message_at=now
                )
                self.conversations.create(conversation)

                self.participants.add_many([
                    ParticipantDO(
                        conversation_id=conversation.id,
                        user_id=uid,
                        role=ROLE_ADMIN if uid == actor_id else ROLE_MEMBER,
                        last_read_at=now,
                        joined_at=now
                    )
                    for uid in members
                ])

                if text:
                    message = MessageDO(
                        id=str(uuid.uuid4()),
                        conversation_id=conversation.id,
                        sender_id=actor_id,
                        content=text,
                        created_at=utcnow()
                    )
                    self._insert_message(message)
                    conversation.last_message_at = message.created_at
                    conversation.last_message_preview = self._preview(text)
        except Exception as e:
            self.logger.error(f"Failed to create conversation for {actor_id}: {e}")
            raise ConversationCreateError(f"Failed to create conversation: {e}") from e

        self.cache.invalidate(CONVERSATIONS_TAG)
        if message is not None:
            await self._announce(message)

        return CreateConversationResult(conversation=conversation, created=True)

    async def mark_conversation_read(self, actor_id: Optional[str], conversation_id: str) -> bool:
        """
        Move the actor's last-read marker to now.

        Best effort: without an actor this does nothing.

        Returns:
            True if the actor's participant row was updated
        """
        if not actor_id:
            self.logger.debug(f"Skipping mark-read of {conversation_id}: no actor")
            return False

        updated = self.participants.mark_read(conversation_id, actor_id, utcnow())
        self.cache.invalidate(CONVERSATIONS_TAG)
        return updated
