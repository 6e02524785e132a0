"""Services package."""

from .query_cache import QueryCache
from .profile_resolver import ProfileResolver
from .conversation_reader import ConversationReader
from .message_pager import MessagePager, Page, Exhausted, Failed
from .mutations import MessagingMutations, CreateConversationResult
from .realtime import RealtimeHub, RealtimeInvalidator, MessageInserted
from .messaging import MessagingService

__all__ = [
    "QueryCache",
    "ProfileResolver",
    "ConversationReader",
    "MessagePager",
    "Page",
    "Exhausted",
    "Failed",
    "MessagingMutations",
    "CreateConversationResult",
    "RealtimeHub",
    "RealtimeInvalidator",
    "MessageInserted",
    "MessagingService",
]
