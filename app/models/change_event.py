"""
Events exchanged with the change-notification transport.

They only say "something changed"; subscribers re-read state instead of
applying deltas, so duplicates and reordering across keys are harmless.
"""

from datetime import datetime, timezone
from typing import Literal, Optional, Union

from pydantic import BaseModel, Field


def _now() -> datetime:
    return datetime.now(timezone.utc)


class PickChanged(BaseModel):
    type: Literal["pick_changed"] = "pick_changed"
    user_id: str
    game_id: int
    outcome: str  # created | replaced | deleted
    team_id: Optional[int] = None
    emitted_at: datetime = Field(default_factory=_now)


class ContestSettled(BaseModel):
    """Consumed: the result feed asserts a game is final."""

    type: Literal["contest_settled"] = "contest_settled"
    game_id: int
    emitted_at: datetime = Field(default_factory=_now)


class ScoresUpdated(BaseModel):
    type: Literal["scores_updated"] = "scores_updated"
    game_id: int
    user_ids: list[str]
    emitted_at: datetime = Field(default_factory=_now)


ChangeEvent = Union[PickChanged, ContestSettled, ScoresUpdated]
