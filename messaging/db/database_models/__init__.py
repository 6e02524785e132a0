"""Database models (Data Objects) - map to database tables."""

from .conversation import ConversationDO, ParticipantDO
from .message import MessageDO
from .profile import ProfileDO

__all__ = ["ConversationDO", "ParticipantDO", "MessageDO", "ProfileDO"]
