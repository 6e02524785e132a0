"""Repository layer for data access."""

from .conversation import ConversationRepository
from .participant import ParticipantRepository
from .message import MessageRepository
from .profile import ProfileRepository

__all__ = [
    "ConversationRepository",
    "ParticipantRepository",
    "MessageRepository",
    "ProfileRepository",
]
