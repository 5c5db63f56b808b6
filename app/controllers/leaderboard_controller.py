"""
Controlador de leaderboards - Endpoints de clasificación

El leaderboard se recalcula desde los picks liquidados; el servicio guarda
el último cálculo hasta que llega una notificación de cambio.
"""

from typing import Optional

from fastapi import APIRouter, Query
from pydantic import BaseModel

from app.core.config import get_settings
from app.core.dependencies import Database, CurrentUser
from app.models.leaderboard import LeaderboardEntry, UserStats
from app.services.leaderboard_service import LeaderboardService


router = APIRouter(prefix="/leaderboard", tags=["leaderboard"])


class LeaderboardResponse(BaseModel):
    """Leaderboard ordenado."""
    entries: list[LeaderboardEntry]


@router.get("", response_model=LeaderboardResponse)
async def get_leaderboard(
    db: Database,
    limit: Optional[int] = Query(None, ge=1, le=500)
):
    """
    Obtener el leaderboard global.
    """
    leaderboard_service = LeaderboardService(db)
    entries = await leaderboard_service.get_leaderboard(limit or get_settings().leaderboard_limit)

    return LeaderboardResponse(entries=entries)


@router.get("/me", response_model=UserStats)
async def get_my_stats(user: CurrentUser, db: Database):
    """
    Puntos, posición, picks abiertos y cantidad de jugadores.
    """
    leaderboard_service = LeaderboardService(db)
    return await leaderboard_service.get_user_stats(user.id)
