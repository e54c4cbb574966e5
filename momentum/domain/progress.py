"""Cumulative progress models: stats, levels, streaks."""

import math
from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field


class UserStats(BaseModel):
    """Cumulative counters for a user.

    XP and level change only through the reward service; streak fields only
    through the streak service.
    """

    total_xp: int = Field(default=0, ge=0, description="Lifetime XP")
    level: int = Field(default=1, ge=1, description="Level derived from total XP")
    current_streak: int = Field(default=0, ge=0, description="Current daily streak length")
    longest_streak: int = Field(default=0, ge=0, description="Longest daily streak ever")
    total_tasks_completed: int = Field(default=0, ge=0)
    total_chains_completed: int = Field(default=0, ge=0)
    perfect_days: int = Field(default=0, ge=0)
    good_enough_days: int = Field(default=0, ge=0)
    zero_days: int = Field(default=0, ge=0)
    average_energy_level: float = Field(default=0.0, ge=0, description="Running average of rated days")
    most_productive_hour: int | None = Field(default=None, ge=0, le=23)
    most_productive_day: str | None = Field(default=None, description="Weekday name")
    recoveries: int = Field(default=0, ge=0, description="Returns after a zero day")
    early_bird_completions: int = Field(default=0, ge=0)
    night_owl_completions: int = Field(default=0, ge=0)


class LevelDefinition(BaseModel):
    """One entry in the level table."""

    level: int
    name: str
    min_xp: int
    max_xp: float
    perks: list[str] = Field(default_factory=list)


LEVELS: tuple[LevelDefinition, ...] = (
    LevelDefinition(level=1, name="Spark", min_xp=0, max_xp=100),
    LevelDefinition(level=2, name="Ember", min_xp=100, max_xp=250, perks=["Streak Shield x1"]),
    LevelDefinition(level=3, name="Flame", min_xp=250, max_xp=500, perks=["Custom Chain Colors"]),
    LevelDefinition(level=4, name="Fire", min_xp=500, max_xp=1000, perks=["Streak Shield x2"]),
    LevelDefinition(level=5, name="Blaze", min_xp=1000, max_xp=2000, perks=["Daily Bonus XP"]),
    LevelDefinition(level=6, name="Inferno", min_xp=2000, max_xp=4000, perks=["Streak Shield x3"]),
    LevelDefinition(level=7, name="Phoenix", min_xp=4000, max_xp=8000, perks=["Recovery Boost"]),
    LevelDefinition(level=8, name="Solar", min_xp=8000, max_xp=16000, perks=["Legendary Loot Chance Up"]),
    LevelDefinition(level=9, name="Supernova", min_xp=16000, max_xp=32000, perks=["Unlimited Streak Shields"]),
    LevelDefinition(level=10, name="Momentum Master", min_xp=32000, max_xp=math.inf, perks=["Unlock Everything"]),
)


class StreakType(StrEnum):
    """What a streak measures."""

    DAILY = "daily"
    CHAIN = "chain"
    FOCUS = "focus"


class Streak(BaseModel):
    """Consecutive-day continuity with forgiveness shields.

    `shields_available + shields_used` only grows, through `add_streak_shield`.
    """

    id: str = Field(..., description="Unique streak ID")
    type: StreakType = Field(default=StreakType.DAILY, description="Metric this streak tracks")
    current_count: int = Field(default=0, ge=0, description="True consecutive-day count")
    longest_count: int = Field(default=0, ge=0, description="Best count ever reached")
    last_activity_date: datetime = Field(..., description="Last qualifying activity")
    shields_available: int = Field(default=0, ge=0, description="Unspent shields")
    shields_used: int = Field(default=0, ge=0, description="Shields consumed over the streak's life")
    started_at: datetime = Field(..., description="When the current run started")
