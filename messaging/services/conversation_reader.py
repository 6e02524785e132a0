"""Conversation list assembly for one actor."""

from typing import Dict, List, Optional

from ..db.repositories.conversation import ConversationRepository
from ..db.repositories.message import MessageRepository
from ..db.repositories.participant import ParticipantRepository
from ..models.conversation import ConversationResponse, ParticipantResponse
from ..models.profile import ProfileSummary
from ..utils.logger import get_app_logger
from .profile_resolver import ProfileResolver
from .query_cache import QueryCache, conversations_key


class ConversationReader:
    """
    Builds the actor's inbox: conversations, members, profiles and unread
    counts merged into one view model per conversation.
    """

    def __init__(
        self,
        participants: ParticipantRepository,
        conversations: ConversationRepository,
        messages: MessageRepository,
        profiles: ProfileResolver,
        cache: Optional[QueryCache] = None
    ):
        self.participants = participants
        self.conversations = conversations
        self.messages = messages
        self.profiles = profiles
        self.cache = cache
        self.logger = get_app_logger()

    async def list_conversations(self, actor_id: Optional[str]) -> List[ConversationResponse]:
        """
        List the actor's conversations, most recent message first.

        Args:
            actor_id: Current user; None yields an empty list

        Returns:
            List of ConversationResponse
        """
        if not actor_id:
            return []

        if self.cache is None:
            return await self._load(actor_id)

        return await self.cache.get_or_fetch(
            conversations_key(actor_id),
            lambda: self._load(actor_id)
        )

    async def _load(self, actor_id: str) -> List[ConversationResponse]:
        own_rows = self.participants.list_by_user(actor_id)
        if not own_rows:
            return []

        conversation_ids = [row.conversation_id for row in own_rows]
        last_read = {row.conversation_id: row.last_read_at for row in own_rows}

        conversations = self.conversations.list_by_ids(conversation_ids)
        if not conversations:
            return []

        members = self.participants.list_by_conversations(conversation_ids)
        profiles = await self.profiles.resolve(member.user_id for member in members)
        unread = self._unread_counts(actor_id)

        members_by_conversation: Dict[str, List[ParticipantResponse]] = {}
        for member in members:
            members_by_conversation.setdefault(member.conversation_id, []).append(
                ParticipantResponse(
                    user_id=member.user_id,
                    role=member.role,
                    last_read_at=member.last_read_at,
                    profile=profiles.get(member.user_id) or ProfileSummary()
                )
            )

        return [
            ConversationResponse(
                id=conv.id,
                type=conv.type,
                title=conv.title,
                last_message_at=conv.last_message_at,
                last_message_preview=conv.last_message_preview,
                participants=members_by_conversation.get(conv.id, []),
                unread_count=unread.get(conv.id, 0) if last_read.get(conv.id) else 0
            )
            for conv in conversations
        ]

    def _unread_counts(self, actor_id: str) -> Dict[str, int]:
        # Unread counts are decorative; the list must load without them
        try:
            return self.messages.unread_counts(actor_id)
        except Exception as e:
            self.logger.warning(f"Unread count aggregate failed for {actor_id}, using zero: {e}")
            return {}
