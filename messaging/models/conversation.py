"""Conversation API models."""

from datetime import datetime
from typing import Optional, List, Literal
from pydantic import BaseModel, Field

from .profile import ProfileSummary


class ParticipantResponse(BaseModel):
    """A conversation member annotated with profile data."""

    user_id: str = Field(description="Participant user ID")
    role: str = Field(description="Participant role (admin/member)")
    last_read_at: Optional[datetime] = Field(None, description="When the participant last read the conversation")
    profile: ProfileSummary = Field(
        default_factory=ProfileSummary,
        description="Resolved profile; all fields empty when the profile is unknown"
    )


class ConversationResponse(BaseModel):
    """Conversation view model as seen by one actor."""

    id: str = Field(description="Conversation ID")
    type: Literal["direct", "group"] = Field(description="Conversation kind")
    title: Optional[str] = Field(None, description="Conversation title")
    last_message_at: datetime = Field(description="Timestamp of the most recent message")
    last_message_preview: Optional[str] = Field(None, description="Preview of the most recent message")
    participants: List[ParticipantResponse] = Field(default_factory=list, description="Members")
    unread_count: int = Field(default=0, description="Messages the actor has not read")


class ConversationListResponse(BaseModel):
    """Response model for listing conversations."""

    conversations: List[ConversationResponse] = Field(description="Conversations, most recent first")
    total: int = Field(description="Total number of conversations")


class CreateConversationRequest(BaseModel):
    """Request model for creating (or reusing) a conversation."""

    participant_ids: List[str] = Field(description="Users to talk to, besides the actor", min_length=1)
    initial_message: Optional[str] = Field(None, description="Optional first message")
    title: Optional[str] = Field(None, description="Group title", max_length=200)


class CreateConversationResponse(BaseModel):
    """Response model for conversation creation."""

    id: str = Field(description="Conversation ID")
    type: Literal["direct", "group"] = Field(description="Conversation kind")
    title: Optional[str] = Field(None, description="Conversation title")
    created_by: Optional[str] = Field(None, description="Creator user ID")
    created_at: datetime = Field(description="Creation timestamp")
    last_message_at: datetime = Field(description="Timestamp of the most recent message")
    last_message_preview: Optional[str] = Field(None, description="Preview of the most recent message")
    created: bool = Field(description="False when an existing direct conversation was returned")


class MarkReadResponse(BaseModel):
    """Response model for marking a conversation read."""

    conversation_id: str = Field(description="Conversation ID")
    updated: bool = Field(description="Whether a participant row was updated")
