"""Message API models."""

from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field


class SenderSummary(BaseModel):
    """Display fields of a message sender."""

    display_name: Optional[str] = Field(None, description="Sender display name")
    avatar_url: Optional[str] = Field(None, description="Sender avatar URL")


class MessageResponse(BaseModel):
    """A single message enriched with its sender."""

    id: str = Field(description="Message ID")
    conversation_id: str = Field(description="Conversation ID")
    sender_id: Optional[str] = Field(None, description="Sender user ID; None for system messages")
    content: Optional[str] = Field(None, description="Text content")
    message_type: str = Field(default="text", description="Message type tag")
    media_url: Optional[str] = Field(None, description="Attached media URL")
    shared_content_id: Optional[str] = Field(None, description="Shared post/recipe ID")
    shared_content_type: Optional[str] = Field(None, description="Shared content kind")
    is_edited: bool = Field(default=False, description="Edited flag")
    is_deleted: bool = Field(default=False, description="Deleted flag")
    created_at: datetime = Field(description="Creation timestamp")
    sender: Optional[SenderSummary] = Field(None, description="Resolved sender profile")


class MessagePageResponse(BaseModel):
    """One page of messages, newest first."""

    conversation_id: str = Field(description="Conversation ID")
    items: List[MessageResponse] = Field(description="Messages, newest first")
    next_cursor: Optional[str] = Field(None, description="Cursor for the next (older) page; None when exhausted")


class SendMessageRequest(BaseModel):
    """Request model for sending a message."""

    content: str = Field(default="", description="Message text", max_length=10000)
    message_type: str = Field(default="text", description="Message type tag")
    media_url: Optional[str] = Field(None, description="Attached media URL")
    shared_content_id: Optional[str] = Field(None, description="Shared content ID")
    shared_content_type: Optional[str] = Field(None, description="Shared content kind")
