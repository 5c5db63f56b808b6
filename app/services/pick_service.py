"""
PickService - Business logic for picks.

One entry point, submit_pick, decides between create / replace / delete
(toggle) / reject. Everything for a (user, game) key runs under a per-key
lock, and the lock-gate check happens inside that same critical section
with the clock read at that moment.
"""

import logging
from typing import Optional
from uuid import uuid4

from motor.motor_asyncio import AsyncIOMotorDatabase

from app.core.clock import SystemClock
from app.core.config import get_settings
from app.core.locks import KeyedLock, pick_key, pick_locks
from app.models.change_event import PickChanged
from app.models.game import Game
from app.models.pick import (
    Pick,
    RejectionReason,
    SubmitOutcome,
    SubmitResult,
    UserPicks,
)
from app.repositories.game_repository import GameRepository
from app.repositories.pick_repository import (
    DuplicateActivePickError,
    PickRepository,
    truncate_to_millis,
)
from app.services.change_notifier import ChangeNotifier, notifier as default_notifier
from app.services.lock_gate import LockGate, is_locked

logger = logging.getLogger(__name__)

__all__ = [
    "PickService",
    "PickServiceError",
    "GameNotFoundError",
    "InvalidTeamError",
    "DuplicateActivePickError",
]


class PickServiceError(Exception):
    """Base exception for pick service errors."""
    pass


class GameNotFoundError(PickServiceError):
    """Raised when a game referenced by a request or a pick does not exist."""
    pass


class InvalidTeamError(PickServiceError):
    """Raised when the chosen team is not playing in the game."""
    pass


class PickService:
    def __init__(
        self,
        db: AsyncIOMotorDatabase,
        notifier: Optional[ChangeNotifier] = None,
        clock=None,
        locks: Optional[KeyedLock] = None,
    ):
        self.pick_repo = PickRepository(db)
        self.game_repo = GameRepository(db)
        self.notifier = notifier or default_notifier
        self.clock = clock or SystemClock()
        self.locks = locks or pick_locks
        self.lock_gate = LockGate()
        self.max_attempts = max(1, get_settings().pick_write_attempts)

    async def submit_pick(
        self,
        user_id: str,
        game_id: int,
        team_id: Optional[int]
    ) -> SubmitResult:
        """
        Create, change or clear the user's pick for a game.

        - no pick + team      -> CREATED
        - no pick + None      -> UNCHANGED
        - same team or None   -> DELETED (picking the current team again clears it)
        - other team          -> REPLACED, in one write
        - game started        -> REJECTED(locked), nothing changes
        """
        game = await self.game_repo.get_by_id(game_id)
        if not game:
            raise GameNotFoundError(f"Game {game_id} not found")

        if team_id is not None and game.side_of(team_id) is None:
            raise InvalidTeamError(f"Team {team_id} is not playing in game {game_id}")

        key = pick_key(user_id, game_id)

        async with self.locks.hold(key):
            now = self.clock()
            reason = self.lock_gate.check(game, now)
            if reason is not None:
                logger.info("Rejected pick %s: %s", key, reason.value)
                return SubmitResult(
                    outcome=SubmitOutcome.REJECTED,
                    reason=reason,
                    pick=await self.pick_repo.get_by_key(key),
                )

            result = await self._apply(key, user_id, game, team_id, now)

        if result.outcome != SubmitOutcome.UNCHANGED:
            logger.info("Pick %s %s (team %s)", key, result.outcome.value, team_id)
            await self.notifier.publish(PickChanged(
                user_id=user_id,
                game_id=game_id,
                outcome=result.outcome.value,
                team_id=result.pick.team_id if result.pick else None,
            ))

        return result

    async def _apply(
        self,
        key: str,
        user_id: str,
        game: Game,
        team_id: Optional[int],
        now
    ) -> SubmitResult:
        # Another process can win a race on the same key. Re-read and re-apply
        # the toggle/replace decision instead of surfacing a half-applied state.
        for attempt in range(1, self.max_attempts + 1):
            current = await self.pick_repo.get_by_key(key)

            if current is not None and current.is_settled:
                return SubmitResult(
                    outcome=SubmitOutcome.REJECTED,
                    reason=RejectionReason.LOCKED,
                    pick=current,
                )

            try:
                result = await self._transition(key, user_id, game, team_id, current, now)
            except DuplicateActivePickError:
                result = None

            if result is not None:
                return result

            logger.warning(
                "Pick %s changed concurrently, re-applying (attempt %d/%d)",
                key, attempt, self.max_attempts
            )

        raise DuplicateActivePickError(
            f"Could not apply pick {key} after {self.max_attempts} attempts"
        )

    async def _transition(
        self,
        key: str,
        user_id: str,
        game: Game,
        team_id: Optional[int],
        current: Optional[Pick],
        now
    ) -> Optional[SubmitResult]:
        """One compare-and-swap step. None means the expectation failed."""
        if current is None:
            if team_id is None:
                return SubmitResult(outcome=SubmitOutcome.UNCHANGED)

            pick = await self.pick_repo.insert(self._new_pick(key, user_id, game.id, team_id, now))
            return SubmitResult(outcome=SubmitOutcome.CREATED, pick=pick)

        if team_id is None or team_id == current.team_id:
            if not await self.pick_repo.delete_if(key, current.team_id):
                return None
            return SubmitResult(outcome=SubmitOutcome.DELETED, previous=current)

        replacement = self._new_pick(key, user_id, game.id, team_id, now)
        pick = await self.pick_repo.replace_team(key, current.team_id, replacement)
        if pick is None:
            return None
        return SubmitResult(outcome=SubmitOutcome.REPLACED, pick=pick, previous=current)

    @staticmethod
    def _new_pick(key: str, user_id: str, game_id: int, team_id: int, now) -> Pick:
        return Pick(
            key=key,
            id=uuid4().hex,
            user_id=user_id,
            game_id=game_id,
            team_id=team_id,
            score=None,
            created_at=truncate_to_millis(now),
        )

    async def get_user_picks(self, user_id: str) -> UserPicks:
        """
        All of a user's picks, split by lock state right now.

        active: game not started, the pick can still change.
        settled: game started, the pick is frozen (scored or waiting for the result).
        """
        picks = await self.pick_repo.list_for_user(user_id)
        games = await self.game_repo.get_many(p.game_id for p in picks)
        now = self.clock()

        active, settled = [], []
        for pick in picks:
            game = games.get(pick.game_id)
            if game is None:
                raise GameNotFoundError(f"Pick {pick.key} references missing game {pick.game_id}")
            (settled if is_locked(game, now) else active).append(pick)

        return UserPicks(active=active, settled=settled)
