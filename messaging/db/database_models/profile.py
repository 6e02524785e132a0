"""Profile database model."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class ProfileDO:
    """Profile data object - maps to user_profiles table."""

    user_id: str
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None
    handle: Optional[str] = None
