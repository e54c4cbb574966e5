"""Achievement, loot and quest domain models."""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class Rarity(StrEnum):
    """Rarity tier shared by achievements and loot."""

    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"


class ConditionType(StrEnum):
    """Stat an achievement threshold is measured against."""

    TASKS_COMPLETED = "tasks_completed"
    STREAK = "streak"
    XP_EARNED = "xp_earned"
    CHAINS_COMPLETED = "chains_completed"
    PERFECT_DAYS = "perfect_days"
    RECOVERY = "recovery"
    EARLY_BIRD = "early_bird"
    NIGHT_OWL = "night_owl"


class AchievementCondition(BaseModel):
    """Unlock condition for an achievement."""

    type: ConditionType
    threshold: int = Field(..., ge=1)


class Achievement(BaseModel):
    """Static catalog entry."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    icon: str
    xp_reward: int
    rarity: Rarity
    condition: AchievementCondition
    is_hidden: bool = False


class UserAchievement(BaseModel):
    """Per-user unlock record; only `celebrated` changes after creation."""

    id: str = Field(..., description="Unique unlock record ID")
    achievement_id: str = Field(..., description="Catalog achievement ID")
    unlocked_at: datetime = Field(..., description="When the condition was first met")
    celebrated: bool = Field(default=False, description="Whether the unlock was shown to the user")


class LootType(StrEnum):
    """What a loot drop grants."""

    XP_BONUS = "xp_bonus"
    STREAK_SHIELD = "streak_shield"


class LootDrop(BaseModel):
    """Fire-and-forget probabilistic reward; the caller applies it."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Unique drop ID")
    type: LootType = Field(..., description="Reward kind")
    value: int = Field(..., ge=1, description="XP amount or number of shields")
    task_id: str = Field(..., description="Task whose completion produced the drop")
    rarity: Rarity = Field(..., description="Rarity tier")
    claimed_at: datetime = Field(..., description="When the drop was rolled")


class QuestType(StrEnum):
    """Progress metric a quest tracks."""

    COMPLETE_TASKS = "complete_tasks"
    EARN_XP = "earn_xp"
    MAINTAIN_STREAK = "maintain_streak"
    CHAIN_COMPLETION = "chain_completion"
    FOCUS_TIME = "focus_time"


class Quest(BaseModel):
    """Single daily quest."""

    id: str
    title: str
    description: str
    type: QuestType
    target: int = Field(..., ge=1)
    current: int = Field(default=0, ge=0)
    xp_reward: int = Field(..., ge=0)
    completed: bool = False


class DailyQuest(BaseModel):
    """The day's quest board."""

    id: str
    date: datetime
    quests: list[Quest] = Field(default_factory=list)
    completed: int = 0
    total: int = 0
