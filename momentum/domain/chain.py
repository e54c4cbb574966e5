"""Momentum chain domain models."""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field


class ChainTrigger(StrEnum):
    """What starts a chain."""

    MANUAL = "manual"
    TIME = "time"
    LOCATION = "location"
    AFTER_TASK = "after_task"


class MomentumChain(BaseModel):
    """Ordered run of tasks done back to back."""

    id: str = Field(..., description="Unique chain ID")
    name: str = Field(..., description="Chain name (e.g., 'Morning Launch')")
    description: str | None = Field(default=None)
    task_ids: list[str] = Field(default_factory=list, description="Member task IDs")
    is_active: bool = Field(default=True)
    created_at: datetime = Field(..., description="Creation timestamp")
    trigger_type: ChainTrigger = Field(default=ChainTrigger.MANUAL)
    trigger_time: str | None = Field(default=None, description="HH:MM for time triggers")
    trigger_location: str | None = Field(default=None)
    trigger_task_id: str | None = Field(default=None)
    times_completed: int = Field(default=0, ge=0)
    average_completion_minutes: float = Field(default=0.0, ge=0)
