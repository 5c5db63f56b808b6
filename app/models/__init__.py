from .user import User
from .team import Team
from .game import Game, GameResult, GameView, Slate
from .pick import Pick, PickCreate, SubmitOutcome, SubmitResult, UserPicks
from .leaderboard import LeaderboardEntry, UserStats
from .change_event import ChangeEvent, ContestSettled, PickChanged, ScoresUpdated

__all__ = [
    "User",
    "Team",
    "Game",
    "GameResult",
    "GameView",
    "Slate",
    "Pick",
    "PickCreate",
    "SubmitOutcome",
    "SubmitResult",
    "UserPicks",
    "LeaderboardEntry",
    "UserStats",
    "ChangeEvent",
    "ContestSettled",
    "PickChanged",
    "ScoresUpdated",
]
