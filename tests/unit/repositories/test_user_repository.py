"""
Unit tests for UserRepository
"""

import pytest

from app.repositories.user_repository import UserRepository


@pytest.fixture
async def repo(test_db, sample_users):
    await test_db["users"].insert_many(sample_users)
    return UserRepository(test_db)


class TestUserRepository:
    """Test suite for UserRepository database operations."""

    @pytest.mark.asyncio
    async def test_get_by_id(self, repo):
        user = await repo.get_by_id("user-b")

        assert user.id == "user-b"
        assert user.email == "bob@example.com"
        assert user.display_name == "Bob"
        assert user.is_admin is False

    @pytest.mark.asyncio
    async def test_get_by_id_not_found(self, repo):
        assert await repo.get_by_id("nobody") is None

    @pytest.mark.asyncio
    async def test_display_names(self, repo):
        names = await repo.get_display_names(["user-a", "user-b", "user-a", "nobody"])

        # user-a has no name, falls back to the email local part
        assert names == {"user-a": "alice", "user-b": "Bob"}

    @pytest.mark.asyncio
    async def test_display_names_empty(self, repo):
        assert await repo.get_display_names([]) == {}
