"""
Fixtures for integration tests
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from httpx import ASGITransport, AsyncClient

from app.core.security import create_access_token
from app.database import Database
from app.main import app, wire_reactors
from app.models.game import Game
from app.repositories.game_repository import GameRepository
from app.services.change_notifier import notifier
from app.services.leaderboard_service import leaderboard_cache


@pytest.fixture
async def client(test_db):
    """
    HTTP client for testing API endpoints.

    The lifespan hook does not run under ASGITransport, so the test
    database and the notification handlers are wired here.
    """
    original_db = Database.db
    Database.db = test_db
    leaderboard_cache.invalidate()
    wire_reactors()

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    notifier.clear_handlers()
    leaderboard_cache.invalidate()
    Database.db = original_db


@pytest.fixture
async def users(test_db, sample_users):
    await test_db["users"].insert_many(sample_users)
    return sample_users


def _headers(user: dict) -> dict:
    token = create_access_token(user["_id"], user["email"])
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers(users):
    """Bearer headers for user-a"""
    return _headers(users[0])


@pytest.fixture
def other_auth_headers(users):
    """Bearer headers for user-b"""
    return _headers(users[1])


@pytest.fixture
def admin_headers(users):
    """Bearer headers for the result feed's admin account"""
    return _headers(users[2])


@pytest.fixture
async def open_game(test_db, sample_teams):
    """
    Game that starts tomorrow by the wall clock.

    The API reads the real clock, so these games are placed relative to now.
    """
    repo = GameRepository(test_db)
    for team in sample_teams:
        await repo.create_team(team)

    game = Game(
        id=700,
        home_team_id=1,
        away_team_id=2,
        start_time=datetime.now(timezone.utc) + timedelta(days=1),
        spread=Decimal("-3.5"),
    )
    return await repo.create(game)


@pytest.fixture
async def started_game(test_db, open_game):
    """Game that kicked off an hour ago."""
    game = Game(
        id=800,
        home_team_id=3,
        away_team_id=4,
        start_time=datetime.now(timezone.utc) - timedelta(hours=1),
        spread=Decimal("2"),
    )
    return await GameRepository(test_db).create(game)
