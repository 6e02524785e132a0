"""Conversation database models."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ...utils.timeutil import utcnow


CONVERSATION_DIRECT = "direct"
CONVERSATION_GROUP = "group"

ROLE_ADMIN = "admin"
ROLE_MEMBER = "member"


@dataclass
class ConversationDO:
    """Conversation data object - maps to conversations table."""

    id: str
    type: str
    title: Optional[str] = None
    created_by: Optional[str] = None
    created_at: datetime = field(default_factory=utcnow)
    last_message_at: datetime = field(default_factory=utcnow)
    last_message_preview: Optional[str] = None


@dataclass
class ParticipantDO:
    """Participant data object - maps to conversation_participants table."""

    conversation_id: str
    user_id: str
    role: str = ROLE_MEMBER
    last_read_at: Optional[datetime] = field(default_factory=utcnow)
    joined_at: datetime = field(default_factory=utcnow)
