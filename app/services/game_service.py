"""
GameService - today's and yesterday's games as a player sees them.
"""

from datetime import datetime, timedelta
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from app.core.clock import SystemClock, local_date, local_day_bounds
from app.core.config import get_settings
from app.models.game import Game, GameView, Slate
from app.models.pick import Pick
from app.repositories.game_repository import GameRepository
from app.repositories.pick_repository import PickRepository
from app.services.lock_gate import is_locked


class GameService:
    def __init__(self, db: AsyncIOMotorDatabase, clock=None, timezone_name: Optional[str] = None):
        self.game_repo = GameRepository(db)
        self.pick_repo = PickRepository(db)
        self.clock = clock or SystemClock()
        self.timezone_name = timezone_name or get_settings().app_timezone

    async def get_slate(self, user_id: str) -> Slate:
        """Games starting today and yesterday (app timezone) with the user's picks."""
        now = self.clock()
        today = local_date(now, self.timezone_name)

        today_games = await self._games_on(today)
        yesterday_games = await self._games_on(today - timedelta(days=1))

        picks = await self.pick_repo.get_for_games(
            user_id, (game.id for game in today_games + yesterday_games)
        )
        teams = await self.game_repo.get_teams(
            team_id for game in today_games + yesterday_games for team_id in game.team_ids
        )

        return Slate(
            today=[self._view(g, teams, picks.get(g.id), now) for g in today_games],
            yesterday=[self._view(g, teams, picks.get(g.id), now) for g in yesterday_games],
        )

    async def _games_on(self, day) -> list[Game]:
        start, end = local_day_bounds(day, self.timezone_name)
        return await self.game_repo.get_starting_between(start, end)

    @staticmethod
    def _view(game: Game, teams: dict, pick: Optional[Pick], now: datetime) -> GameView:
        locked = is_locked(game, now)
        return GameView(
            id=game.id,
            start_time=game.start_time,
            home_team=teams[game.home_team_id],
            away_team=teams[game.away_team_id],
            spread=game.spread,
            home_score=game.home_score,
            away_score=game.away_score,
            locked=locked,
            live=locked and not game.ended,
            final=game.ended,
            picked_team_id=pick.team_id if pick else None,
            pick_score=pick.score if pick else None,
        )
