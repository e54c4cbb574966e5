"""Domain models."""

from momentum.domain.chain import ChainTrigger, MomentumChain
from momentum.domain.context import FocusSession, Location, Mood, UserContext
from momentum.domain.day import DayRating, DayType, MinimumViableDay, Recovery
from momentum.domain.progress import LEVELS, LevelDefinition, Streak, StreakType, UserStats
from momentum.domain.reward import (
    Achievement,
    AchievementCondition,
    ConditionType,
    DailyQuest,
    LootDrop,
    LootType,
    Quest,
    QuestType,
    Rarity,
    UserAchievement,
)
from momentum.domain.state import MomentumState
from momentum.domain.task import (
    PRIORITY_ORDER,
    EnergyLevel,
    RecurrenceFrequency,
    RecurrenceRule,
    Task,
    TaskContext,
    TaskPriority,
    TaskStatus,
)


__all__ = [
    "LEVELS",
    "PRIORITY_ORDER",
    "Achievement",
    "AchievementCondition",
    "ChainTrigger",
    "ConditionType",
    "DailyQuest",
    "DayRating",
    "DayType",
    "EnergyLevel",
    "FocusSession",
    "LevelDefinition",
    "Location",
    "LootDrop",
    "LootType",
    "MinimumViableDay",
    "MomentumChain",
    "MomentumState",
    "Mood",
    "Quest",
    "QuestType",
    "Rarity",
    "Recovery",
    "RecurrenceFrequency",
    "RecurrenceRule",
    "Streak",
    "StreakType",
    "Task",
    "TaskContext",
    "TaskPriority",
    "TaskStatus",
    "UserAchievement",
    "UserContext",
    "UserStats",
]
