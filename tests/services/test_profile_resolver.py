"""Tests for ProfileResolver."""

import pytest
from unittest.mock import patch

from messaging.db.repositories.profile import ProfileRepository
from messaging.services.profile_resolver import ProfileResolver


@pytest.fixture
def resolver(db_conn):
    return ProfileResolver(ProfileRepository(db_conn.conn), search_limit=2)


class TestProfileResolver:
    """Tests for ProfileResolver."""

    class TestResolve:
        """SUT: ProfileResolver.resolve"""

        async def test_empty_input_skips_query(self, resolver):
            """No ids means no store round-trip."""
            with patch.object(resolver.repo, "get_many") as get_many:
                assert await resolver.resolve([]) == {}
                assert await resolver.resolve([None, ""]) == {}
            get_many.assert_not_called()

        async def test_single_deduplicated_query(self, seed, resolver):
            """Duplicate and None ids collapse into one lookup."""
            seed.profile("alice")
            seed.profile("bob")
            with patch.object(resolver.repo, "get_many", wraps=resolver.repo.get_many) as get_many:
                result = await resolver.resolve(["alice", "bob", "alice", None])
            get_many.assert_called_once_with(["alice", "bob"])
            assert set(result) == {"alice", "bob"}

        async def test_fields(self, seed, resolver):
            seed.profile("alice", display_name="Alice Liddell", handle="wonder")
            profile = (await resolver.resolve(["alice"]))["alice"]
            assert profile.display_name == "Alice Liddell"
            assert profile.handle == "wonder"
            assert profile.avatar_url == "https://cdn.example.com/alice.png"

        async def test_unknown_ids_absent(self, seed, resolver):
            seed.profile("alice")
            result = await resolver.resolve(["alice", "ghost"])
            assert "ghost" not in result

        async def test_accepts_generator(self, seed, resolver):
            seed.profile("alice")
            result = await resolver.resolve(uid for uid in ["alice"])
            assert list(result) == ["alice"]

        async def test_store_error_propagates(self, resolver):
            with patch.object(resolver.repo, "get_many", side_effect=RuntimeError("db down")):
                with pytest.raises(RuntimeError, match="db down"):
                    await resolver.resolve(["alice"])

    class TestSearch:
        """SUT: ProfileResolver.search"""

        async def test_short_query_skips_query(self, resolver):
            with patch.object(resolver.repo, "search") as search:
                assert await resolver.search("a") == []
                assert await resolver.search("  b  ") == []
            search.assert_not_called()

        async def test_excludes_actor(self, seed, resolver):
            seed.profile("alice", display_name="Alice")
            seed.profile("alicia", display_name="Alicia")
            results = await resolver.search("ali", exclude_user_id="alice")
            assert [r.user_id for r in results] == ["alicia"]

        async def test_default_limit(self, seed, resolver):
            """search_limit applies when no limit is given."""
            for uid in ["ann", "anna", "annie"]:
                seed.profile(uid)
            assert len(await resolver.search("ann")) == 2
            assert len(await resolver.search("ann", limit=5)) == 3
