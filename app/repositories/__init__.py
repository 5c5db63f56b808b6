from .game_repository import GameRepository
from .pick_repository import PickRepository
from .user_repository import UserRepository

__all__ = [
    "GameRepository",
    "PickRepository",
    "UserRepository",
]
