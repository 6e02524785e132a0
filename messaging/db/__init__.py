"""Database package - connection, models, and repositories."""

from .connection import DatabaseConnection
from .repositories.conversation import ConversationRepository
from .repositories.participant import ParticipantRepository
from .repositories.message import MessageRepository
from .repositories.profile import ProfileRepository

__all__ = [
    "DatabaseConnection",
    "ConversationRepository",
    "ParticipantRepository",
    "MessageRepository",
    "ProfileRepository",
]
