"""Profile repository for database operations."""

from typing import Optional, List, Sequence
from .base import BaseRepository
from ..database_models.profile import ProfileDO


_COLUMNS = "user_id, display_name, avatar_url, handle"


def _row_to_profile(row) -> ProfileDO:
    return ProfileDO(
        user_id=row[0],
        display_name=row[1],
        avatar_url=row[2],
        handle=row[3]
    )


class ProfileRepository(BaseRepository):
    """Repository for user profile lookups."""

    def upsert(self, profile: ProfileDO) -> None:
        """
        Insert or replace a profile row.

        Profiles are owned by the account service; this exists for
        provisioning and fixtures.
        """
        self.conn.execute(f"""
            INSERT OR REPLACE INTO user_profiles ({_COLUMNS})
            VALUES (?, ?, ?, ?)
        """, [profile.user_id, profile.display_name, profile.avatar_url, profile.handle])

    def get_many(self, user_ids: Sequence[str]) -> List[ProfileDO]:
        """
        Fetch profiles for a set of users in one query.

        Args:
            user_ids: User IDs (unknown IDs are simply not returned)

        Returns:
            List of ProfileDO instances
        """
        if not user_ids:
            return []

        results = self.conn.execute(f"""
            SELECT {_COLUMNS}
            FROM user_profiles
            WHERE user_id IN ({self._placeholders(user_ids)})
        """, list(user_ids)).fetchall()

        return [_row_to_profile(row) for row in results]

    def search(self, query: str, exclude_user_id: Optional[str], limit: int) -> List[ProfileDO]:
        """
        Case-insensitive substring search over display name and handle.

        Args:
            query: Text to look for
            exclude_user_id: User to leave out of the results (usually the actor)
            limit: Maximum number of results

        Returns:
            List of ProfileDO instances ordered by display name
        """
        pattern = f"%{query}%"
        results = self.conn.execute(f"""
            SELECT {_COLUMNS}
            FROM user_profiles
            WHERE (display_name ILIKE ? OR handle ILIKE ?)
              AND user_id <> ?
            ORDER BY display_name ASC NULLS LAST, user_id ASC
            LIMIT ?
        """, [pattern, pattern, exclude_user_id or "", limit]).fetchall()

        return [_row_to_profile(row) for row in results]
