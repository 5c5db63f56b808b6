"""
LockGate - decides whether picks for a game may still change.

A game locks at its start time and never re-opens. The caller passes the
instant explicitly so the time used for the decision is the time read
inside the write's critical section.
"""

from datetime import datetime
from typing import Optional

from app.core.clock import ensure_utc
from app.models.game import Game
from app.models.pick import RejectionReason


def is_locked(game: Game, now: datetime) -> bool:
    return ensure_utc(now) >= game.start_time


class LockGate:
    def check(self, game: Game, now: datetime) -> Optional[RejectionReason]:
        """None when picks are open, otherwise why the mutation is rejected."""
        if is_locked(game, now):
            return RejectionReason.LOCKED
        return None
