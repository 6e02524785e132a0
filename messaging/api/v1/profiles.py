"""Profile search routes - V1."""

from typing import Optional
from fastapi import APIRouter, Depends, Query

from ...models.profile import ProfileSearchResponse
from ...services.messaging import MessagingService
from .conversations import get_actor_id, get_messaging_service

router = APIRouter(prefix="/api/v1/profiles", tags=["Profiles"])


@router.get("/search", response_model=ProfileSearchResponse)
async def search_profiles(
    q: str = Query("", description="Display name or handle fragment"),
    limit: Optional[int] = Query(None, ge=1, le=50),
    actor_id: Optional[str] = Depends(get_actor_id),
    service: MessagingService = Depends(get_messaging_service)
):
    """Find people to start a conversation with, excluding the actor."""
    profiles = await service.profiles.search(q, exclude_user_id=actor_id, limit=limit)
    return ProfileSearchResponse(profiles=profiles, total=len(profiles))
