"""Profile API models."""

from typing import Optional, List
from pydantic import BaseModel, Field


class ProfileSummary(BaseModel):
    """Display fields of a user profile."""

    display_name: Optional[str] = Field(None, description="Display name")
    avatar_url: Optional[str] = Field(None, description="Avatar image URL")
    handle: Optional[str] = Field(None, description="Unique handle")


class ProfileSearchResult(ProfileSummary):
    """Profile returned from a search, keyed by user."""

    user_id: str = Field(description="User ID")


class ProfileSearchResponse(BaseModel):
    """Response model for profile search."""

    profiles: List[ProfileSearchResult] = Field(description="Matching profiles")
    total: int = Field(description="Number of matches returned")
