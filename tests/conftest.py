"""
Pytest fixtures and configuration for all tests.
"""

import os

# Settings are required at import time; give the test run its own values
os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017")
os.environ.setdefault("MONGODB_DB_NAME", "spread_picks_test")
os.environ.setdefault("JWT_SECRET", "test-secret-key-at-least-32-chars-long")

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import AsyncGenerator

import pytest
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from app.core.clock import FixedClock
from app.core.locks import KeyedLock
from app.models.game import Game
from app.models.team import Team
from app.repositories.game_repository import GameRepository
from app.services.change_notifier import ChangeNotifier

# Set TEST_MONGODB_URI to run against a real MongoDB instead of mongomock
TEST_DB_URI = os.getenv("TEST_MONGODB_URI")
TEST_DB_NAME = "spread_picks_test"

NOW = datetime(2026, 3, 15, 18, 0, tzinfo=timezone.utc)


@pytest.fixture(scope="session")
def worker_id(request):
    """
    Return the worker ID when using pytest-xdist, otherwise 'master'.
    This allows each worker to use its own test database.
    """
    if hasattr(request.config, "workerinput"):
        return request.config.workerinput["workerid"]
    return "master"


@pytest.fixture(scope="function")
async def test_db(worker_id) -> AsyncGenerator[AsyncIOMotorDatabase, None]:
    """
    Provide a clean test database for each test.

    In-memory (mongomock) by default; a real server when TEST_MONGODB_URI is set.
    """
    if TEST_DB_URI:
        client = AsyncIOMotorClient(TEST_DB_URI)
    else:
        mongomock_motor = pytest.importorskip("mongomock_motor")
        client = mongomock_motor.AsyncMongoMockClient()
    db_name = f"{TEST_DB_NAME}_{worker_id}" if worker_id != "master" else TEST_DB_NAME
    db = client[db_name]

    yield db

    # Cleanup: drop all collections after test
    collection_names = await db.list_collection_names()
    for collection_name in collection_names:
        await db[collection_name].drop()

    if TEST_DB_URI:
        client.close()


@pytest.fixture
def clock():
    """Clock pinned to NOW; tests move it to cross the lock time."""
    return FixedClock(NOW)


@pytest.fixture
def notifier():
    """Private notifier so tests can record events without touching the app singleton."""
    return ChangeNotifier()


@pytest.fixture
def locks():
    return KeyedLock()


@pytest.fixture
def published(notifier):
    """Every event published on the test notifier, in order."""
    events = []
    original = notifier.publish

    async def recording_publish(event):
        events.append(event)
        await original(event)

    notifier.publish = recording_publish
    return events


@pytest.fixture
def sample_teams():
    return [
        Team(id=1, name="Kansas City Chiefs", nickname="KC", primary_color="#E31837", secondary_color="#FFB81C"),
        Team(id=2, name="Buffalo Bills", nickname="BUF", primary_color="#00338D", secondary_color="#C60C30"),
        Team(id=3, name="Dallas Cowboys", nickname="DAL", primary_color="#003594"),
        Team(id=4, name="Philadelphia Eagles", nickname="PHI", primary_color="#004C54"),
    ]


@pytest.fixture
def sample_game():
    """Home team 1 favored by 3, starts two hours after NOW."""
    return Game(
        id=100,
        home_team_id=1,
        away_team_id=2,
        start_time=NOW + timedelta(hours=2),
        spread=Decimal("-3"),
    )


@pytest.fixture
def other_game():
    """Team 3 hosts team 4, home underdog by 3.5, starts one hour after NOW."""
    return Game(
        id=200,
        home_team_id=3,
        away_team_id=4,
        start_time=NOW + timedelta(hours=1),
        spread=Decimal("3.5"),
    )


@pytest.fixture
async def seeded_db(test_db, sample_teams, sample_game, other_game):
    """Test DB with the sample teams and both games."""
    repo = GameRepository(test_db)
    for team in sample_teams:
        await repo.create_team(team)
    await repo.create(sample_game)
    await repo.create(other_game)
    return test_db


@pytest.fixture
def sample_users():
    return [
        {"_id": "user-a", "email": "alice@example.com", "name": None, "is_active": True, "is_admin": False},
        {"_id": "user-b", "email": "bob@example.com", "name": "Bob", "is_active": True, "is_admin": False},
        {"_id": "feed", "email": "results-feed@example.com", "name": "Results Feed", "is_active": True, "is_admin": True},
    ]


@pytest.fixture
def finish_game(seeded_db):
    """Write a final score the way the result feed does."""

    async def _finish(game_id: int, home_score: int, away_score: int):
        return await GameRepository(seeded_db).record_final_score(game_id, home_score, away_score)

    return _finish
