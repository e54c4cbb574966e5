"""Pydantic models for service layer return types.

These models give the host typed, validated results at service boundaries.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from momentum.domain.day import DayRating, DayType
from momentum.domain.progress import LevelDefinition
from momentum.domain.reward import Achievement, LootDrop
from momentum.domain.state import MomentumState
from momentum.domain.task import Task


class ScoredSuggestion(BaseModel):
    """A candidate task with its suitability score."""

    task_id: str
    score: int = Field(..., ge=0)
    reasons: list[str] = Field(default_factory=list)


class XPBonus(BaseModel):
    """One bonus contribution to a task's XP."""

    reason: str
    amount: int


class LevelUp(BaseModel):
    """Level change caused by a reward."""

    from_level: int
    to_level: int


class XPReward(BaseModel):
    """XP produced by one task completion."""

    base: int
    bonuses: list[XPBonus] = Field(default_factory=list)
    total: int
    loot_drop: LootDrop | None = None
    level_up: LevelUp | None = None


class LevelProgress(BaseModel):
    """Progress from the current level towards the next."""

    current_level: LevelDefinition
    next_level: LevelDefinition | None
    progress_percent: int
    xp_to_next: int


class DayEvaluation(BaseModel):
    """Classification of a finished day."""

    type: DayType
    tasks_completed: int
    tasks_planned: int
    completion_rate: float
    mvd_achieved: bool
    message: str
    xp_earned: int


class WelcomeBack(BaseModel):
    """Re-engagement copy after a gap."""

    message: str
    sub_message: str
    suggested_action: str


class StreakAnalysis(BaseModel):
    """Streak recomputed from the day rating log."""

    current_streak: int
    days_since_last_activity: int
    is_streak_broken: bool
    can_recover: bool
    recovery_message: str


class PastWin(BaseModel):
    """A good day at a similar energy level."""

    date: datetime
    description: str
    energy_level: int
    tasks_completed: int


class ProductivityPattern(BaseModel):
    """Advisory observation about the rating log."""

    type: str = Field(..., description="'positive' or 'warning'")
    pattern: str
    suggestion: str


class RestartCeremony(BaseModel):
    """Fresh-start payload."""

    acknowledgment: str
    intention: str
    first_action: Task | None
    new_streak_started: bool


class EnergyBasedSuggestion(BaseModel):
    """A named group of tasks suited to an energy level."""

    category: str
    tasks: list[Task]
    reason: str


class TimeFit(BaseModel):
    """Pending tasks bucketed by how they fit a time budget."""

    fits: list[Task]
    almost_fits: list[Task]
    too_long: list[Task]


class TaskStats(BaseModel):
    """Aggregate figures over a task list."""

    total_pending: int
    total_completed: int
    total_skipped: int
    completion_rate: float
    average_completion_minutes: float
    overdue_count: int
    streak_eligible: int


class ChainProgress(BaseModel):
    """Completion progress through a chain."""

    completed: int
    total: int
    percentage: int


class CompletionOutcome(BaseModel):
    """Everything that followed one task completion."""

    state: MomentumState
    task: Task
    reward: XPReward
    new_achievements: list[Achievement] = Field(default_factory=list)
    next_occurrence: Task | None = None
    chain_completed: bool = False
    is_recovery: bool = False


class DayCloseOutcome(BaseModel):
    """Result of closing out a day."""

    state: MomentumState
    evaluation: DayEvaluation
    rating: DayRating
    new_achievements: list[Achievement] = Field(default_factory=list)
    welcome_back: WelcomeBack | None = None
