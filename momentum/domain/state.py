"""Host-owned snapshot of one user's engine state."""

from pydantic import BaseModel, Field

from momentum.domain.chain import MomentumChain
from momentum.domain.context import UserContext
from momentum.domain.day import DayRating, MinimumViableDay
from momentum.domain.progress import Streak, UserStats
from momentum.domain.reward import DailyQuest, UserAchievement
from momentum.domain.task import Task


class MomentumState(BaseModel):
    """Everything the engine reads for one user.

    The host owns persistence; `model_dump_json()` / `model_validate_json()`
    round-trip the snapshot.
    """

    user_id: str = Field(..., description="Owner of this snapshot")
    tasks: list[Task] = Field(default_factory=list)
    chains: list[MomentumChain] = Field(default_factory=list)
    context: UserContext = Field(..., description="Latest situational context")
    stats: UserStats = Field(default_factory=UserStats)
    streaks: list[Streak] = Field(default_factory=list)
    day_ratings: list[DayRating] = Field(default_factory=list)
    achievements: list[UserAchievement] = Field(default_factory=list)
    minimum_viable_day: MinimumViableDay | None = Field(default=None)
    daily_quest: DailyQuest | None = Field(default=None)
