from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from app.core.clock import ensure_utc
from app.models.fields import ExactDecimal
from app.models.team import Team


class Game(BaseModel):
    """
    Partido entre dos equipos con su spread.

    spread va desde la perspectiva del local: negativo = local favorito,
    positivo = local underdog. Se fija al crear el partido y no cambia.
    """

    id: int

    home_team_id: int
    away_team_id: int

    start_time: datetime  # picks se bloquean a esta hora (UTC)

    spread: ExactDecimal = Decimal(0)

    # Ambos None hasta que el feed de resultados los publica
    home_score: Optional[int] = None
    away_score: Optional[int] = None
    ended: bool = False

    class Config:
        populate_by_name = True

    @field_validator("start_time")
    @classmethod
    def _start_time_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    @model_validator(mode="after")
    def _scores_both_or_neither(self) -> "Game":
        if (self.home_score is None) != (self.away_score is None):
            raise ValueError("home_score and away_score must be set together")
        if self.home_team_id == self.away_team_id:
            raise ValueError("home and away team must differ")
        return self

    @property
    def team_ids(self) -> tuple[int, int]:
        return self.home_team_id, self.away_team_id

    @property
    def has_final_score(self) -> bool:
        return self.home_score is not None and self.away_score is not None

    @property
    def is_settleable(self) -> bool:
        return self.ended and self.has_final_score

    def side_of(self, team_id: int) -> Optional[Literal["home", "away"]]:
        if team_id == self.home_team_id:
            return "home"
        if team_id == self.away_team_id:
            return "away"
        return None


class GameView(BaseModel):
    """Partido tal como lo ve un jugador en la cartelera del día"""

    id: int
    start_time: datetime

    home_team: Team
    away_team: Team

    spread: ExactDecimal
    home_score: Optional[int] = None
    away_score: Optional[int] = None

    locked: bool  # ya empezó, no se aceptan cambios
    live: bool    # bloqueado y sin terminar
    final: bool   # el feed marcó el partido como terminado

    picked_team_id: Optional[int] = None
    pick_score: Optional[ExactDecimal] = None


class Slate(BaseModel):
    """Partidos de hoy y de ayer en la zona horaria de la app"""

    today: list[GameView]
    yesterday: list[GameView]


class GameResult(BaseModel):
    """Body de POST /games/{game_id}/result (feed de resultados)"""

    home_score: int = Field(..., ge=0)
    away_score: int = Field(..., ge=0)
