from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from app.core.clock import ensure_utc
from app.models.fields import ExactDecimal

PickResult = Literal["win", "loss", "push"]


def pick_result(score: Optional[Decimal]) -> Optional[PickResult]:
    """Sign of the outcome: > 0 covered, < 0 did not, exactly 0 pushed."""
    if score is None:
        return None
    if score > 0:
        return "win"
    if score < 0:
        return "loss"
    return "push"


class Pick(BaseModel):
    """Elección de un usuario para un partido (a lo sumo una por usuario y partido)"""

    key: str = Field(..., alias="_id")  # user_id:game_id

    id: str  # uuid nuevo en cada create/replace

    user_id: str
    game_id: int
    team_id: int

    score: Optional[ExactDecimal] = None  # se escribe una sola vez al liquidar

    created_at: datetime

    class Config:
        populate_by_name = True

    @field_validator("created_at")
    @classmethod
    def _created_at_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    @property
    def is_settled(self) -> bool:
        return self.score is not None

    @property
    def result(self) -> Optional[PickResult]:
        return pick_result(self.score)


class PickCreate(BaseModel):
    """Body de POST /picks. team_id null = quitar el pick"""

    game_id: int
    team_id: Optional[int] = None


class PickResponse(BaseModel):
    id: str
    game_id: int
    team_id: int
    score: Optional[ExactDecimal] = None
    result: Optional[PickResult] = None
    created_at: datetime

    @classmethod
    def from_pick(cls, pick: Pick) -> "PickResponse":
        return cls(
            id=pick.id,
            game_id=pick.game_id,
            team_id=pick.team_id,
            score=pick.score,
            result=pick.result,
            created_at=pick.created_at,
        )


class SubmitOutcome(str, Enum):
    CREATED = "created"
    REPLACED = "replaced"
    DELETED = "deleted"
    UNCHANGED = "unchanged"  # quitar un pick que no existe
    REJECTED = "rejected"


class RejectionReason(str, Enum):
    LOCKED = "locked"


class SubmitResult(BaseModel):
    """Resultado de submit_pick"""

    outcome: SubmitOutcome
    pick: Optional[Pick] = None       # el pick vigente después de la operación
    previous: Optional[Pick] = None   # el pick que había antes, si había
    reason: Optional[RejectionReason] = None

    @property
    def rejected(self) -> bool:
        return self.outcome == SubmitOutcome.REJECTED


class SubmitResponse(BaseModel):
    outcome: SubmitOutcome
    pick: Optional[PickResponse] = None


class UserPicks(BaseModel):
    """Picks de un usuario partidos por el estado del lock al momento de la consulta"""

    active: list[Pick]   # partido sin empezar, todavía editable
    settled: list[Pick]  # partido bloqueado (con o sin score)


class UserPicksResponse(BaseModel):
    active: list[PickResponse]
    settled: list[PickResponse]
