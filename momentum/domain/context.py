"""User situational context models."""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field

from momentum.core.clock import TimeOfDay
from momentum.domain.task import EnergyLevel


class Location(StrEnum):
    """Where the user currently is."""

    HOME = "home"
    WORK = "work"
    TRANSIT = "transit"
    ERRAND = "errand"
    OTHER = "other"


class Mood(StrEnum):
    """Self-reported mood."""

    FOCUSED = "focused"
    SCATTERED = "scattered"
    CREATIVE = "creative"
    TIRED = "tired"
    ANXIOUS = "anxious"
    MOTIVATED = "motivated"


class UserContext(BaseModel):
    """Ephemeral snapshot of the user's situation.

    `time_of_day` and `day_of_week` are always derived from `timestamp`.
    """

    timestamp: datetime = Field(..., description="When the snapshot was taken")
    time_of_day: TimeOfDay = Field(..., description="Bucket derived from the wall-clock hour")
    day_of_week: int = Field(..., ge=0, le=6, description="0=Monday ... 6=Sunday")
    location: Location | None = Field(default=None, description="Current location")
    energy_level: EnergyLevel | None = Field(default=None, description="Self-reported energy")
    mood: Mood | None = Field(default=None, description="Self-reported mood")
    available_minutes: int | None = Field(default=None, ge=0, description="Time budget for the next task")
    is_in_focus_mode: bool = Field(default=False, description="Whether a focus session is running")
    current_task_id: str | None = Field(default=None, description="Task being worked on")


class FocusSession(BaseModel):
    """A timed focus block."""

    id: str = Field(..., description="Unique session ID")
    task_id: str | None = Field(default=None, description="Task the session is for")
    start_time: datetime = Field(..., description="When the session started")
    planned_minutes: int = Field(..., ge=1, description="Planned duration")
    actual_minutes: int | None = Field(default=None, description="Measured duration once ended")
    completed: bool = Field(default=False, description="Whether the session ran its course")
    distractions: int = Field(default=0, ge=0, description="Distractions recorded during the session")
