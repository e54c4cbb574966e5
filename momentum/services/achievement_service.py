"""Achievement catalog and unlock checks."""

import logging
from collections import defaultdict
from collections.abc import Iterable

from momentum.core.clock import Clock, system_clock
from momentum.core.errors import InvalidStateError
from momentum.domain.progress import UserStats
from momentum.domain.reward import Achievement, AchievementCondition, ConditionType, Rarity, UserAchievement
from momentum.services.task_service import new_id


logger = logging.getLogger(__name__)


def _achievement(
    achievement_id: str,
    name: str,
    description: str,
    icon: str,
    xp_reward: int,
    rarity: Rarity,
    condition_type: ConditionType,
    threshold: int,
    *,
    is_hidden: bool = False,
) -> Achievement:
    return Achievement(
        id=achievement_id,
        name=name,
        description=description,
        icon=icon,
        xp_reward=xp_reward,
        rarity=rarity,
        condition=AchievementCondition(type=condition_type, threshold=threshold),
        is_hidden=is_hidden,
    )


ACHIEVEMENTS: tuple[Achievement, ...] = (
    # Getting started
    _achievement("first_task", "First Step", "Complete your first task", "👣", 25, Rarity.COMMON,
                 ConditionType.TASKS_COMPLETED, 1),
    _achievement("ten_tasks", "Getting Momentum", "Complete 10 tasks", "🚀", 50, Rarity.COMMON,
                 ConditionType.TASKS_COMPLETED, 10),
    _achievement("hundred_tasks", "Centurion", "Complete 100 tasks", "💯", 200, Rarity.RARE,
                 ConditionType.TASKS_COMPLETED, 100),
    _achievement("thousand_tasks", "Task Titan", "Complete 1,000 tasks", "🏆", 1000, Rarity.LEGENDARY,
                 ConditionType.TASKS_COMPLETED, 1000, is_hidden=True),
    # Streaks
    _achievement("streak_3", "Getting Consistent", "Reach a 3-day streak", "🔥", 30, Rarity.COMMON,
                 ConditionType.STREAK, 3),
    _achievement("streak_7", "Week Warrior", "Reach a 7-day streak", "🌟", 100, Rarity.UNCOMMON,
                 ConditionType.STREAK, 7),
    _achievement("streak_30", "Monthly Master", "Reach a 30-day streak", "👑", 500, Rarity.EPIC,
                 ConditionType.STREAK, 30),
    _achievement("streak_100", "Unstoppable", "Reach a 100-day streak", "🌋", 2000, Rarity.LEGENDARY,
                 ConditionType.STREAK, 100, is_hidden=True),
    # Recovery
    _achievement("bounce_back", "Bounce Back", "Complete a task after missing a day", "🦘", 50, Rarity.UNCOMMON,
                 ConditionType.RECOVERY, 1),
    _achievement("phoenix", "Phoenix", "Recover from 5 zero days", "🐦", 150, Rarity.RARE,
                 ConditionType.RECOVERY, 5),
    _achievement("resilient", "Resilient", "Recover from 20 zero days", "💎", 500, Rarity.EPIC,
                 ConditionType.RECOVERY, 20, is_hidden=True),
    # Time of day
    _achievement("early_bird", "Early Bird", "Complete 10 tasks before 9 AM", "🌅", 75, Rarity.UNCOMMON,
                 ConditionType.EARLY_BIRD, 10),
    _achievement("night_owl", "Night Owl", "Complete 10 tasks after 10 PM", "🦉", 75, Rarity.UNCOMMON,
                 ConditionType.NIGHT_OWL, 10),
    # Chains
    _achievement("chain_starter", "Chain Starter", "Complete your first momentum chain", "⛓️", 40, Rarity.COMMON,
                 ConditionType.CHAINS_COMPLETED, 1),
    _achievement("chain_master", "Chain Master", "Complete 50 momentum chains", "🔗", 300, Rarity.RARE,
                 ConditionType.CHAINS_COMPLETED, 50),
    # Perfect days
    _achievement("perfect_day", "Perfect Day", "Complete all planned tasks in a day", "✨", 100, Rarity.UNCOMMON,
                 ConditionType.PERFECT_DAYS, 1),
    _achievement("perfect_week", "Perfect Week", "Have 7 perfect days", "🌈", 500, Rarity.EPIC,
                 ConditionType.PERFECT_DAYS, 7),
)

def _index_by_condition(catalog: Iterable[Achievement]) -> dict[ConditionType, tuple[Achievement, ...]]:
    grouped: dict[ConditionType, list[Achievement]] = defaultdict(list)
    for achievement in catalog:
        grouped[achievement.condition.type].append(achievement)
    return {condition: tuple(entries) for condition, entries in grouped.items()}


ACHIEVEMENTS_BY_CONDITION = _index_by_condition(ACHIEVEMENTS)


def _stat_for(condition_type: ConditionType, stats: UserStats) -> int:
    match condition_type:
        case ConditionType.TASKS_COMPLETED:
            return stats.total_tasks_completed
        case ConditionType.STREAK:
            return stats.longest_streak
        case ConditionType.XP_EARNED:
            return stats.total_xp
        case ConditionType.CHAINS_COMPLETED:
            return stats.total_chains_completed
        case ConditionType.PERFECT_DAYS:
            return stats.perfect_days
        case ConditionType.RECOVERY:
            return stats.recoveries
        case ConditionType.EARLY_BIRD:
            return stats.early_bird_completions
        case ConditionType.NIGHT_OWL:
            return stats.night_owl_completions
    return 0


def get_achievement(achievement_id: str) -> Achievement | None:
    return next((a for a in ACHIEVEMENTS if a.id == achievement_id), None)


def check_for_new_achievements(stats: UserStats, existing: Iterable[UserAchievement]) -> list[Achievement]:
    """Catalog entries whose condition stats now meet and that are not yet unlocked.

    Returned in catalog order.
    """
    unlocked_ids = {a.achievement_id for a in existing}
    values = {condition: _stat_for(condition, stats) for condition in ACHIEVEMENTS_BY_CONDITION}
    earned = [
        a for a in ACHIEVEMENTS if a.id not in unlocked_ids and values[a.condition.type] >= a.condition.threshold
    ]
    if earned:
        logger.info(f"Unlocked achievements: {', '.join(a.id for a in earned)}")
    return earned


def create_user_achievement(achievement: Achievement, *, clock: Clock = system_clock) -> UserAchievement:
    return UserAchievement(id=new_id(), achievement_id=achievement.id, unlocked_at=clock.now())


def mark_celebrated(user_achievement: UserAchievement) -> UserAchievement:
    """Flag an unlock as shown.

    Raises:
        InvalidStateError: If it was already celebrated
    """
    if user_achievement.celebrated:
        msg = f"Achievement {user_achievement.achievement_id} was already celebrated"
        raise InvalidStateError(msg)
    return user_achievement.model_copy(update={"celebrated": True})
