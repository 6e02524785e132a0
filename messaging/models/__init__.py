"""Pydantic models for API request/response."""

from .profile import ProfileSummary, ProfileSearchResult, ProfileSearchResponse
from .conversation import (
    ParticipantResponse,
    ConversationResponse,
    ConversationListResponse,
    CreateConversationRequest,
    CreateConversationResponse,
    MarkReadResponse,
)
from .message import (
    SenderSummary,
    MessageResponse,
    MessagePageResponse,
    SendMessageRequest,
)

__all__ = [
    "ProfileSummary",
    "ProfileSearchResult",
    "ProfileSearchResponse",
    "ParticipantResponse",
    "ConversationResponse",
    "ConversationListResponse",
    "CreateConversationRequest",
    "CreateConversationResponse",
    "MarkReadResponse",
    "SenderSummary",
    "MessageResponse",
    "MessagePageResponse",
    "SendMessageRequest",
]
