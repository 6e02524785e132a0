"""Wires the messaging components around one database connection."""

from ..config import Settings
from ..db.connection import DatabaseConnection
from ..db.repositories.conversation import ConversationRepository
from ..db.repositories.message import MessageRepository
from ..db.repositories.participant import ParticipantRepository
from ..db.repositories.profile import ProfileRepository
from ..utils.logger import get_app_logger
from .conversation_reader import ConversationReader
from .message_pager import MessagePager
from .mutations import MessagingMutations
from .profile_resolver import ProfileResolver
from .query_cache import QueryCache
from .realtime import RealtimeHub, RealtimeInvalidator


class MessagingService:
    """Owns the cache, realtime hub, readers and mutations for the app."""

    def __init__(self, db: DatabaseConnection, settings: Settings):
        self.db = db
        self.settings = settings
        self.logger = get_app_logger()

        self.cache = QueryCache(stale_seconds=settings.conversation_stale_seconds)
        self.hub = RealtimeHub()
        self.invalidator = RealtimeInvalidator(self.hub, self.cache)

        self.participant_repo = ParticipantRepository(db.conn)
        self.profiles = ProfileResolver(
            ProfileRepository(db.conn),
            search_limit=settings.profile_search_limit
        )
        self.reader = ConversationReader(
            participants=self.participant_repo,
            conversations=ConversationRepository(db.conn),
            messages=MessageRepository(db.conn),
            profiles=self.profiles,
            cache=self.cache
        )
        self.pager = MessagePager(
            messages=MessageRepository(db.conn),
            profiles=self.profiles,
            page_size=settings.message_page_size,
            lookahead=settings.pagination_lookahead,
            cache=self.cache
        )
        self.mutations = MessagingMutations(
            db=db,
            cache=self.cache,
            hub=self.hub,
            preview_length=settings.preview_length
        )

    def start(self) -> None:
        self.invalidator.start()

    async def shutdown(self) -> None:
        self.invalidator.stop()
        self.hub.clear()
        self.cache.clear()
        self.logger.info("Messaging service stopped")

    def is_participant(self, conversation_id: str, user_id: str) -> bool:
        return self.participant_repo.get(conversation_id, user_id) is not None
