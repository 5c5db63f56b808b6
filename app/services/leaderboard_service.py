"""
LeaderboardService - ranks users by the sum of their settled pick scores.

The ranking is always a pure recomputation over the current picks (rank()).
The cached snapshot is only a shortcut: it is dropped on every pick or
score change and must equal a fresh rank() over the same picks.
"""

import logging
from collections import defaultdict
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Mapping, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from app.core.clock import SystemClock
from app.models.change_event import PickChanged, ScoresUpdated
from app.models.game import Game
from app.models.leaderboard import LeaderboardEntry, UserStats
from app.models.pick import Pick
from app.models.user import display_name_for
from app.repositories.game_repository import GameRepository
from app.repositories.pick_repository import PickRepository
from app.repositories.user_repository import UserRepository
from app.services.change_notifier import ChangeNotifier
from app.services.lock_gate import is_locked

logger = logging.getLogger(__name__)


def rank(
    picks: Iterable[Pick],
    display_names: Optional[Mapping[str, str]] = None
) -> list[LeaderboardEntry]:
    """
    Leaderboard from scratch.

    Only scored picks count; users without any scored pick are not listed.
    Order is total_points descending, then user_id ascending, so equal
    totals always come out in the same order. Ranks are positions 1..N.
    """
    display_names = display_names or {}

    totals: dict[str, Decimal] = defaultdict(Decimal)
    counts: dict[str, dict[str, int]] = defaultdict(lambda: {"win": 0, "loss": 0, "push": 0})

    for pick in picks:
        if not pick.is_settled:
            continue
        totals[pick.user_id] += pick.score
        counts[pick.user_id][pick.result] += 1

    ordered = sorted(totals, key=lambda user_id: (-totals[user_id], user_id))

    return [
        LeaderboardEntry(
            rank=position,
            user_id=user_id,
            display_name=display_names.get(user_id) or display_name_for(None, None),
            total_points=totals[user_id],
            settled_picks=sum(counts[user_id].values()),
            wins=counts[user_id]["win"],
            losses=counts[user_id]["loss"],
            pushes=counts[user_id]["push"],
        )
        for position, user_id in enumerate(ordered, start=1)
    ]


def active_pick_counts(
    picks: Iterable[Pick],
    games_by_id: Mapping[int, Game],
    now: datetime
) -> dict[str, int]:
    """Per user, picks that are unscored and whose game has not started."""
    counts: dict[str, int] = defaultdict(int)
    for pick in picks:
        game = games_by_id.get(pick.game_id)
        if pick.is_settled or game is None or is_locked(game, now):
            continue
        counts[pick.user_id] += 1
    return dict(counts)


class LeaderboardCache:
    """Last computed leaderboard, valid until the next change notification."""

    def __init__(self):
        self._entries: Optional[list[LeaderboardEntry]] = None
        self._version = 0

    @property
    def version(self) -> int:
        return self._version

    def get(self) -> Optional[list[LeaderboardEntry]]:
        return self._entries

    def store(self, entries: list[LeaderboardEntry], version: int) -> None:
        # A change that landed while we were computing makes this result stale
        if version == self._version:
            self._entries = entries

    def invalidate(self) -> None:
        self._version += 1
        self._entries = None


leaderboard_cache = LeaderboardCache()


def register_cache_invalidation(notifier: ChangeNotifier, cache: LeaderboardCache) -> None:
    async def on_change(event) -> None:
        cache.invalidate()

    notifier.on(PickChanged, on_change)
    notifier.on(ScoresUpdated, on_change)


class LeaderboardService:
    def __init__(
        self,
        db: AsyncIOMotorDatabase,
        cache: Optional[LeaderboardCache] = None,
        clock=None,
    ):
        self.pick_repo = PickRepository(db)
        self.game_repo = GameRepository(db)
        self.user_repo = UserRepository(db)
        self.cache = cache if cache is not None else leaderboard_cache
        self.clock = clock or SystemClock()

    async def compute_leaderboard(self) -> list[LeaderboardEntry]:
        """Full recomputation from every pick in the store."""
        picks = await self.pick_repo.list_all()
        names = await self.user_repo.get_display_names(p.user_id for p in picks if p.is_settled)
        return rank(picks, names)

    async def get_leaderboard(self, limit: Optional[int] = None) -> list[LeaderboardEntry]:
        """Ranked entries, served from the cache when nothing changed since the last read."""
        entries = self.cache.get()
        if entries is None:
            version = self.cache.version
            entries = await self.compute_leaderboard()
            self.cache.store(entries, version)
            logger.debug("Leaderboard recomputed: %d entries", len(entries))

        return entries[:limit] if limit else list(entries)

    async def get_user_stats(self, user_id: str) -> UserStats:
        """Points, rank, open picks and player count for one user."""
        entries = await self.get_leaderboard()
        entry = next((e for e in entries if e.user_id == user_id), None)

        user_picks = await self.pick_repo.list_for_user(user_id)
        games = await self.game_repo.get_many(p.game_id for p in user_picks)
        active = active_pick_counts(user_picks, games, self.clock()).get(user_id, 0)

        user = await self.user_repo.get_by_id(user_id)
        total_players = len(await self.pick_repo.distinct_user_ids())

        return UserStats(
            user_id=user_id,
            display_name=user.display_name if user else display_name_for(None, None),
            total_points=entry.total_points if entry else Decimal(0),
            active_picks=active,
            rank=entry.rank if entry else None,
            total_players=total_players,
        )
