"""Day rating and recovery domain models."""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from momentum.domain.task import EnergyLevel


class DayType(StrEnum):
    """Qualitative outcome of a day."""

    PERFECT = "perfect"
    GOOD = "good"
    OKAY = "okay"
    MINIMUM_VIABLE = "minimum_viable"
    ZERO = "zero"


class DayRating(BaseModel):
    """Append-only record of how a day went."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Unique rating ID")
    date: datetime = Field(..., description="Day the rating describes")
    type: DayType = Field(..., description="Qualitative day type")
    energy_level: EnergyLevel = Field(..., description="Energy level that day")
    tasks_completed: int = Field(..., ge=0)
    xp_earned: int = Field(..., ge=0)
    notes: str | None = Field(default=None, description="Optional free-text note")


class MinimumViableDay(BaseModel):
    """Small set of tasks; completing any one keeps a day from being zero."""

    id: str = Field(..., description="Unique MVD ID")
    task_ids: list[str] = Field(default_factory=list)
    description: str = Field(default="Do at least one of these to keep your momentum")


class Recovery(BaseModel):
    """A return after one or more missed days."""

    id: str = Field(..., description="Unique recovery ID")
    started_at: datetime = Field(..., description="When the user came back")
    ended_at: datetime | None = Field(default=None, description="When the first task after the gap was done")
    days_missed: int = Field(..., ge=0)
    recovery_task_id: str | None = Field(default=None, description="Task that completed the recovery")
    successful: bool = Field(default=False)
