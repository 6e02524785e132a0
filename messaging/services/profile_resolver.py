"""Batch profile lookup."""

from typing import Dict, Iterable, List, Optional

from ..db.repositories.profile import ProfileRepository
from ..models.profile import ProfileSummary, ProfileSearchResult
from ..utils.logger import get_app_logger


MIN_SEARCH_LENGTH = 2


class ProfileResolver:
    """Resolves display profiles for many users in a single query."""

    def __init__(self, repo: ProfileRepository, search_limit: int = 10):
        self.repo = repo
        self.search_limit = search_limit
        self.logger = get_app_logger()

    async def resolve(self, user_ids: Iterable[Optional[str]]) -> Dict[str, ProfileSummary]:
        """
        Map user IDs to their display profile.

        Empty input returns an empty mapping without a query. Users with no
        profile row are absent from the result. Store errors propagate.

        Args:
            user_ids: User IDs; None entries and duplicates are ignored

        Returns:
            Mapping of user ID to ProfileSummary
        """
        unique_ids = list(dict.fromkeys(uid for uid in user_ids if uid))
        if not unique_ids:
            return {}

        rows = self.repo.get_many(unique_ids)
        if len(rows) < len(unique_ids):
            self.logger.debug(f"Resolved {len(rows)} of {len(unique_ids)} profiles")

        return {
            row.user_id: ProfileSummary(
                display_name=row.display_name,
                avatar_url=row.avatar_url,
                handle=row.handle
            )
            for row in rows
        }

    async def search(
        self,
        query: str,
        exclude_user_id: Optional[str] = None,
        limit: Optional[int] = None
    ) -> List[ProfileSearchResult]:
        """
        Find people to start a conversation with.

        Queries shorter than two characters return nothing without a query.
        """
        query = (query or "").strip()
        if len(query) < MIN_SEARCH_LENGTH:
            return []

        rows = self.repo.search(query, exclude_user_id, limit or self.search_limit)
        return [
            ProfileSearchResult(
                user_id=row.user_id,
                display_name=row.display_name,
                avatar_url=row.avatar_url,
                handle=row.handle
            )
            for row in rows
        ]
