"""Task domain models and enums."""

from datetime import datetime
from enum import StrEnum
from typing import Annotated

from pydantic import BaseModel, Field


EnergyLevel = Annotated[int, Field(ge=1, le=5)]


class TaskStatus(StrEnum):
    """Task lifecycle state."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    SKIPPED = "skipped"
    DEFERRED = "deferred"


class TaskPriority(StrEnum):
    """Task priority, critical highest."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    SOMEDAY = "someday"


PRIORITY_ORDER: dict[TaskPriority, int] = {
    TaskPriority.CRITICAL: 0,
    TaskPriority.HIGH: 1,
    TaskPriority.MEDIUM: 2,
    TaskPriority.LOW: 3,
    TaskPriority.SOMEDAY: 4,
}


class TaskContext(StrEnum):
    """Where or with what a task can be done."""

    HOME = "home"
    WORK = "work"
    ERRAND = "errand"
    ANYWHERE = "anywhere"
    PHONE = "phone"
    COMPUTER = "computer"


class RecurrenceFrequency(StrEnum):
    """How often a recurring task repeats."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    CUSTOM = "custom"


class RecurrenceRule(BaseModel):
    """Repeat schedule for a recurring task."""

    frequency: RecurrenceFrequency = Field(..., description="Base repeat frequency")
    interval: int = Field(default=1, ge=1, description="Every N days/weeks/months")
    days_of_week: list[int] | None = Field(default=None, description="Weekdays for weekly rules (0=Monday)")
    day_of_month: int | None = Field(default=None, ge=1, le=31, description="Day for monthly rules")
    hour: int = Field(default=9, ge=0, le=23, description="Hour of day new instances are scheduled for")
    end_date: datetime | None = Field(default=None, description="No instances after this instant")
    max_occurrences: int | None = Field(default=None, ge=1, description="Stop after this many instances")


class Task(BaseModel):
    """A unit of work.

    `base_xp` is derived once from priority at creation and never recalculated.
    `completed_at` and `actual_minutes` are set exactly once, by `complete_task`.
    """

    id: str = Field(..., description="Unique task ID")
    title: str = Field(..., description="Task title")
    description: str | None = Field(default=None, description="Detailed task description")
    status: TaskStatus = Field(default=TaskStatus.PENDING, description="Current lifecycle state")
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM, description="Task priority")

    estimated_minutes: int = Field(..., ge=0, description="Estimated duration in minutes")
    actual_minutes: int | None = Field(default=None, description="Measured duration, set at completion")
    due_date: datetime | None = Field(default=None, description="When the task is due")
    scheduled_for: datetime | None = Field(default=None, description="When the task is planned")
    created_at: datetime = Field(..., description="Creation timestamp")
    started_at: datetime | None = Field(default=None, description="When the task moved to in_progress")
    completed_at: datetime | None = Field(default=None, description="Completion timestamp")

    energy_required: EnergyLevel = Field(default=3, description="Energy needed, 1 (lowest) to 5")
    contexts: list[TaskContext] = Field(default_factory=lambda: [TaskContext.ANYWHERE])
    tags: list[str] = Field(default_factory=list, description="Free-form tags")

    base_xp: int = Field(..., ge=0, description="XP awarded before bonuses")

    chain_id: str | None = Field(default=None, description="Momentum chain this task belongs to")
    chain_order: int | None = Field(default=None, description="Position within the chain")
    triggered_by: str | None = Field(default=None, description="Task ID whose completion surfaces this one")
    triggers: list[str] = Field(default_factory=list, description="Task IDs surfaced when this one completes")

    is_recurring: bool = Field(default=False, description="Whether completing spawns a new instance")
    recurrence_rule: RecurrenceRule | None = Field(default=None, description="Repeat schedule")
    parent_task_id: str | None = Field(default=None, description="Originating task for recurring or micro instances")
    occurrence_index: int = Field(default=0, description="Instance number for recurring tasks")
