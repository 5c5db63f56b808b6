from typing import Optional
from pydantic import BaseModel

from app.models.fields import ExactDecimal


class LeaderboardEntry(BaseModel):
    """Fila del leaderboard, siempre derivada de los picks liquidados"""

    rank: int
    user_id: str
    display_name: str

    total_points: ExactDecimal

    settled_picks: int
    wins: int
    losses: int
    pushes: int

    class Config:
        populate_by_name = True


class UserStats(BaseModel):
    """Resumen del usuario para la cabecera del dashboard"""

    user_id: str
    display_name: str
    total_points: ExactDecimal
    active_picks: int
    rank: Optional[int] = None  # None si todavía no tiene picks liquidados
    total_players: int
