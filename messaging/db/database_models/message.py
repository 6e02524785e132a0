"""Message database model."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ...utils.timeutil import utcnow


@dataclass
class MessageDO:
    """Message data object - maps to messages table."""

    id: str
    conversation_id: str
    sender_id: Optional[str]
    content: Optional[str]
    message_type: str = "text"
    media_url: Optional[str] = None
    shared_content_id: Optional[str] = None
    shared_content_type: Optional[str] = None
    is_edited: bool = False
    is_deleted: bool = False
    created_at: datetime = field(default_factory=utcnow)
