"""Tests for ProfileRepository."""

import pytest

from messaging.db.repositories.profile import ProfileRepository
from messaging.db.database_models.profile import ProfileDO


@pytest.fixture
def repo(db_conn):
    """Provide a ProfileRepository."""
    return ProfileRepository(db_conn.conn)


def _make_profile(**overrides):
    """Factory for ProfileDO with sensible defaults."""
    defaults = dict(user_id="alice", display_name="Alice Liddell", avatar_url="a.png", handle="alice")
    defaults.update(overrides)
    return ProfileDO(**defaults)


class TestProfileRepository:
    """Tests for ProfileRepository."""

    class TestUpsert:
        """SUT: ProfileRepository.upsert"""

        def test_insert(self, repo):
            repo.upsert(_make_profile())
            [result] = repo.get_many(["alice"])
            assert result.display_name == "Alice Liddell"
            assert result.avatar_url == "a.png"
            assert result.handle == "alice"

        def test_replace(self, repo):
            """Upserting an existing user should overwrite the row."""
            repo.upsert(_make_profile())
            repo.upsert(_make_profile(display_name="Alice L."))
            assert [p.display_name for p in repo.get_many(["alice"])] == ["Alice L."]

    class TestGetMany:
        """SUT: ProfileRepository.get_many"""

        def test_known_ids_only(self, repo):
            """Unknown ids should simply be absent."""
            repo.upsert(_make_profile(user_id="alice"))
            repo.upsert(_make_profile(user_id="bob", handle="bob"))
            results = repo.get_many(["alice", "bob", "ghost"])
            assert sorted(p.user_id for p in results) == ["alice", "bob"]

        def test_empty_input(self, repo):
            assert repo.get_many([]) == []

    class TestSearch:
        """SUT: ProfileRepository.search"""

        @pytest.fixture(autouse=True)
        def _profiles(self, repo):
            repo.upsert(_make_profile(user_id="alice", display_name="Alice Liddell", handle="alice"))
            repo.upsert(_make_profile(user_id="alan", display_name="Alan Turing", handle="enigma"))
            repo.upsert(_make_profile(user_id="bob", display_name="Bob", handle="bobby_al"))

        def test_matches_name_case_insensitive(self, repo):
            results = repo.search("ALICE", None, 10)
            assert [p.user_id for p in results] == ["alice"]

        def test_matches_handle(self, repo):
            results = repo.search("enig", None, 10)
            assert [p.user_id for p in results] == ["alan"]

        def test_ordered_by_display_name(self, repo):
            """'al' hits every profile; results sorted by display name."""
            results = repo.search("al", None, 10)
            assert [p.user_id for p in results] == ["alan", "alice", "bob"]

        def test_excludes_user(self, repo):
            results = repo.search("al", "alice", 10)
            assert "alice" not in [p.user_id for p in results]

        def test_limit(self, repo):
            assert len(repo.search("al", None, 2)) == 2
