"""
Unit tests for LockGate
"""

from datetime import datetime, timedelta, timezone

import pytest

from app.models.game import Game
from app.models.pick import RejectionReason
from app.services.lock_gate import LockGate, is_locked

START = datetime(2026, 1, 4, 18, 0, tzinfo=timezone.utc)


@pytest.fixture
def game():
    return Game(id=1, home_team_id=1, away_team_id=2, start_time=START)


def test_open_before_start(game):
    assert not is_locked(game, START - timedelta(microseconds=1))
    assert LockGate().check(game, START - timedelta(hours=1)) is None


def test_locked_at_start(game):
    assert is_locked(game, START)
    assert LockGate().check(game, START) == RejectionReason.LOCKED


def test_never_reopens(game):
    instants = [START + timedelta(minutes=m) for m in range(0, 60 * 24 * 3, 37)]

    assert all(is_locked(game, now) for now in instants)


def test_ended_game_stays_locked(game):
    game = game.model_copy(update={"home_score": 10, "away_score": 7, "ended": True})

    assert is_locked(game, START + timedelta(days=30))


def test_naive_now_is_utc(game):
    assert is_locked(game, datetime(2026, 1, 4, 18, 0))
    assert not is_locked(game, datetime(2026, 1, 4, 17, 59))
