"""
Scoring against the spread.

    home_margin     = home_score - away_score
    adjusted_margin = home_margin + spread     (spread < 0: home favored)
    outcome         = adjusted_margin   for a home pick
                    = -adjusted_margin  for an away pick

outcome > 0 covered (win), < 0 did not (loss), == 0 push. Everything is
Decimal so a half-point line never produces a fake non-zero.
"""

import logging
from decimal import Decimal
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import BaseModel

from app.core.locks import KeyedLock, pick_locks
from app.models.change_event import ContestSettled, ScoresUpdated
from app.models.game import Game
from app.repositories.game_repository import GameRepository
from app.repositories.pick_repository import PickRepository
from app.services.change_notifier import ChangeNotifier, notifier as default_notifier
from app.services.pick_service import GameNotFoundError, InvalidTeamError

logger = logging.getLogger(__name__)


class ScoringServiceError(Exception):
    """Base exception for scoring errors."""
    pass


class IncompleteSettlementError(ScoringServiceError):
    """The game is not final yet (not ended, or a score is missing). Retry later."""
    pass


class ResultConflictError(ScoringServiceError):
    """A different final score was already recorded for the game."""
    pass


def calculate_outcome(game: Game, team_id: int) -> Decimal:
    """Signed result of a pick on team_id for a final game."""
    if not game.has_final_score:
        raise IncompleteSettlementError(f"Game {game.id} has no final score")

    side = game.side_of(team_id)
    if side is None:
        raise InvalidTeamError(f"Team {team_id} is not playing in game {game.id}")

    home_margin = Decimal(game.home_score - game.away_score)
    adjusted_margin = home_margin + game.spread

    outcome = adjusted_margin if side == "home" else -adjusted_margin
    # -0 and 0 are the same push
    return outcome if outcome != 0 else Decimal(0)


class SettlementSummary(BaseModel):
    game_id: int
    picks_scored: int
    picks_already_scored: int
    users_affected: list[str]


class ScoringService:
    def __init__(
        self,
        db: AsyncIOMotorDatabase,
        notifier: Optional[ChangeNotifier] = None,
        locks: Optional[KeyedLock] = None,
    ):
        self.pick_repo = PickRepository(db)
        self.game_repo = GameRepository(db)
        self.notifier = notifier or default_notifier
        self.locks = locks or pick_locks

    async def record_result(self, game_id: int, home_score: int, away_score: int) -> Game:
        """
        Store a final score from the result feed and announce it.

        Re-sending the same result is allowed; a different score for a game
        that is already final is a conflict. The ContestSettled notification
        is what triggers settlement.
        """
        game = await self.game_repo.get_by_id(game_id)
        if not game:
            raise GameNotFoundError(f"Game {game_id} not found")

        if game.ended and (game.home_score, game.away_score) != (home_score, away_score):
            raise ResultConflictError(
                f"Game {game_id} already final at {game.home_score}-{game.away_score}"
            )

        game = await self.game_repo.record_final_score(game_id, home_score, away_score)
        logger.info("Recorded result for game %s: %d-%d", game_id, home_score, away_score)

        await self.notifier.publish(ContestSettled(game_id=game_id))
        return game

    async def settle(self, game_id: int) -> SettlementSummary:
        """
        Score every pick of a final game.

        Idempotent: a pick that already has a score is left alone, so
        duplicate "game settled" notifications are harmless.
        """
        game = await self.game_repo.get_by_id(game_id)
        if not game:
            raise GameNotFoundError(f"Game {game_id} not found")

        if not game.is_settleable:
            raise IncompleteSettlementError(
                f"Game {game_id} is not final (ended={game.ended}, "
                f"home_score={game.home_score}, away_score={game.away_score})"
            )

        picks = await self.pick_repo.list_for_game(game_id)

        scored, already_scored = 0, 0
        users_affected = []

        for pick in picks:
            async with self.locks.hold(pick.key):
                # Re-read under the lock: the score is computed from the team the pick has now
                current = await self.pick_repo.get_by_key(pick.key)
                if current is None:
                    continue
                if current.is_settled:
                    already_scored += 1
                    continue

                outcome = calculate_outcome(game, current.team_id)
                written = await self.pick_repo.set_score_once(current.key, current.team_id, outcome)

            if written:
                scored += 1
                users_affected.append(current.user_id)
            else:
                already_scored += 1

        logger.info(
            "Settled game %s: %d picks scored, %d already scored",
            game_id, scored, already_scored
        )

        if users_affected:
            await self.notifier.publish(ScoresUpdated(game_id=game_id, user_ids=users_affected))

        return SettlementSummary(
            game_id=game_id,
            picks_scored=scored,
            picks_already_scored=already_scored,
            users_affected=users_affected,
        )


def register_settlement_reactor(notifier: ChangeNotifier, get_db) -> None:
    """
    React to ContestSettled notifications by settling the game.

    A game that is not final yet is deferred: the feed sends the
    notification again once both scores are in.
    """

    async def on_contest_settled(event: ContestSettled) -> None:
        service = ScoringService(get_db(), notifier=notifier)
        try:
            await service.settle(event.game_id)
        except IncompleteSettlementError as e:
            logger.warning("Settlement of game %s deferred: %s", event.game_id, e)

    notifier.on(ContestSettled, on_contest_settled)
