"""XP rewards, levels and loot drops.

Key Concepts:
- Base XP: fixed on the task at creation from its priority.
- Bonuses: independent contributions, all applicable ones summed. A bonus that
  does not apply is absent from the list, never a zero entry.
- Variable-ratio bonus: an unpredictable extra drawn from the injected random
  source on every call (5% +50, 10% +25, 15% +10, 70% nothing).
- Loot drop: a separate roll whose chance grows with level. The drop is
  informational; the caller applies it (see `claim_loot_drop`).

Random draws happen in a fixed order per `calculate_task_xp` call: variable
bonus, loot chance, loot rarity, then loot type for epic and legendary drops.
"""

import logging

from momentum.core.clock import Clock, hours_until, system_clock
from momentum.core.config import constants
from momentum.core.errors import InvalidStateError, ensure_non_negative
from momentum.core.logging import span
from momentum.core.randomness import RandomSource, choose, system_random
from momentum.domain.progress import LEVELS, LevelDefinition, Streak, UserStats
from momentum.domain.reward import LootDrop, LootType, Rarity
from momentum.domain.task import Task, TaskPriority, TaskStatus
from momentum.models.service_models import LevelProgress, LevelUp, XPBonus, XPReward
from momentum.services.streak_service import add_streak_shield
from momentum.services.task_service import new_id


logger = logging.getLogger(__name__)

_CELEBRATIONS: dict[str, tuple[str, ...]] = {
    "task": (
        "Boom! Done! 💥",
        "Crushed it! 🎯",
        "Another one down! 🎸",
        "You're on fire! 🔥",
        "Keep that momentum! 🚀",
        "Unstoppable! ⚡",
    ),
    "chain": (
        "Chain complete! You're building momentum! ⛓️",
        "Full chain! Enjoy that win! 🧠",
        "Momentum chain conquered! 🏆",
    ),
    "quest": (
        "Quest complete! Bonus XP incoming! 🎮",
        "Daily quest done! 📈",
    ),
    "level": (
        "LEVEL UP! New perks unlocked! 🆙",
        "New level reached! 🌟",
    ),
    "achievement": (
        "Achievement unlocked! You earned this! 🏅",
        "New badge for the collection! 🎖️",
    ),
}


# ==========================================
# LEVELS
# ==========================================


def get_level_from_xp(xp: int) -> LevelDefinition:
    """Highest level whose threshold xp has reached."""
    for level in reversed(LEVELS):
        if xp >= level.min_xp:
            return level
    return LEVELS[0]


def get_xp_progress(xp: int) -> LevelProgress:
    """Progress towards the next level."""
    current = get_level_from_xp(xp)
    index = LEVELS.index(current)
    if index == len(LEVELS) - 1:
        return LevelProgress(current_level=current, next_level=None, progress_percent=100, xp_to_next=0)

    next_level = LEVELS[index + 1]
    span_xp = next_level.min_xp - current.min_xp
    return LevelProgress(
        current_level=current,
        next_level=next_level,
        progress_percent=round((xp - current.min_xp) / span_xp * 100),
        xp_to_next=next_level.min_xp - xp,
    )


# ==========================================
# BONUSES
# ==========================================


def roll_variable_bonus(rng: RandomSource = system_random) -> int:
    """Slot-machine bonus: 50, 25, 10 or 0 XP."""
    roll = rng.random()
    for upper_bound, bonus in constants.VARIABLE_BONUS_TIERS:
        if roll < upper_bound:
            return bonus
    return 0


def is_early_bird(hour: int) -> bool:
    start, end = constants.EARLY_BIRD_HOURS
    return start <= hour < end


def is_night_owl(hour: int) -> bool:
    return hour >= constants.NIGHT_OWL_START_HOUR or hour < constants.NIGHT_OWL_END_HOUR


def _time_bonuses(hour: int) -> list[XPBonus]:
    bonuses = []
    if is_early_bird(hour):
        bonuses.append(XPBonus(reason="Early bird! 🌅", amount=constants.EARLY_BIRD_BONUS))
    if is_night_owl(hour):
        bonuses.append(XPBonus(reason="Night owl! 🦉", amount=constants.NIGHT_OWL_BONUS))
    return bonuses


def _deadline_bonus(task: Task) -> XPBonus | None:
    match task:
        case Task(due_date=None) | Task(completed_at=None):
            return None
    hours_early = hours_until(task.due_date, task.completed_at)
    if hours_early > constants.DEADLINE_BEAT_HOURS:
        return XPBonus(reason="Ahead of schedule! ⚡", amount=constants.DEADLINE_BEAT_BONUS)
    return None


def _streak_bonus(streak: Streak | None) -> XPBonus | None:
    match streak:
        case None:
            return None
        case Streak(current_count=count) if count > 0:
            amount = min(count, constants.MAX_VISIBLE_STREAK) * constants.STREAK_DAY_BONUS
            return XPBonus(reason=f"{count}-day streak! 🔥", amount=amount)
    return None


def _speed_bonus(task: Task) -> XPBonus | None:
    if task.actual_minutes is None:
        return None
    if task.actual_minutes < task.estimated_minutes:
        return XPBonus(reason="Speed bonus! ⚡", amount=constants.SPEED_BONUS)
    return None


# ==========================================
# LOOT
# ==========================================


def loot_drop_chance(level: int) -> float:
    """Drop probability at a level."""
    return constants.LOOT_DROP_CHANCE + level * constants.LOOT_DROP_CHANCE_PER_LEVEL


def roll_for_loot_drop(
    task: Task,
    stats: UserStats,
    *,
    rng: RandomSource = system_random,
    clock: Clock = system_clock,
) -> LootDrop | None:
    """Independent loot roll; None when nothing drops."""
    if rng.random() >= loot_drop_chance(stats.level):
        return None

    rarity_roll = rng.random()
    if rarity_roll < constants.LEGENDARY_LOOT_CHANCE:
        rarity = Rarity.LEGENDARY
        loot_type = LootType.STREAK_SHIELD if rng.random() < 0.5 else LootType.XP_BONUS
        value = 3 if loot_type == LootType.STREAK_SHIELD else 100
    elif rarity_roll < constants.EPIC_LOOT_CHANCE:
        rarity = Rarity.EPIC
        loot_type = LootType.STREAK_SHIELD if rng.random() < 0.5 else LootType.XP_BONUS
        value = 2 if loot_type == LootType.STREAK_SHIELD else 75
    elif rarity_roll < constants.RARE_LOOT_CHANCE:
        rarity, loot_type, value = Rarity.RARE, LootType.XP_BONUS, 50
    elif rarity_roll < constants.UNCOMMON_LOOT_CHANCE:
        rarity, loot_type, value = Rarity.UNCOMMON, LootType.XP_BONUS, 25
    else:
        rarity, loot_type, value = Rarity.COMMON, LootType.XP_BONUS, 10

    logger.info(f"Loot drop for task {task.id}: {rarity} {loot_type} ({value})")
    return LootDrop(id=new_id(), type=loot_type, value=value, task_id=task.id, rarity=rarity, claimed_at=clock.now())


# ==========================================
# XP CALCULATION
# ==========================================


def calculate_task_xp(
    task: Task,
    stats: UserStats,
    streak: Streak | None = None,
    *,
    clock: Clock = system_clock,
    rng: RandomSource = system_random,
) -> XPReward:
    """Compute the XP, loot and level change for one completed task.

    Call exactly once per completion, after `complete_task`.

    Raises:
        InvalidStateError: If the task is not completed
    """
    with span("reward_service.calculate_task_xp"):
        if task.status != TaskStatus.COMPLETED:
            msg = f"Cannot reward: task {task.id} is {task.status}, not completed"
            raise InvalidStateError(msg)

        bonuses = _time_bonuses(clock.now().hour)

        optional = [_deadline_bonus(task), _streak_bonus(streak)]
        if task.priority == TaskPriority.CRITICAL:
            optional.append(XPBonus(reason="Critical task done! 💪", amount=constants.CRITICAL_COMPLETION_BONUS))
        optional.append(_speed_bonus(task))
        bonuses.extend(b for b in optional if b is not None)

        lucky = roll_variable_bonus(rng)
        if lucky > 0:
            bonuses.append(XPBonus(reason="Lucky bonus! 🎰", amount=lucky))

        total = task.base_xp + sum(b.amount for b in bonuses)
        loot_drop = roll_for_loot_drop(task, stats, rng=rng, clock=clock)

        current_level = get_level_from_xp(stats.total_xp)
        new_level = get_level_from_xp(stats.total_xp + total)
        level_up = None
        if new_level.level > current_level.level:
            level_up = LevelUp(from_level=current_level.level, to_level=new_level.level)
            logger.info(f"Level up {current_level.level} -> {new_level.level}")

        return XPReward(base=task.base_xp, bonuses=bonuses, total=total, loot_drop=loot_drop, level_up=level_up)


def grant_xp(stats: UserStats, amount: int) -> UserStats:
    """Add XP to stats and recompute the level."""
    ensure_non_negative(amount, field="xp amount")
    total_xp = stats.total_xp + amount
    return stats.model_copy(update={"total_xp": total_xp, "level": get_level_from_xp(total_xp).level})


def apply_xp_reward(stats: UserStats, reward: XPReward) -> UserStats:
    return grant_xp(stats, reward.total)


def claim_loot_drop(
    loot: LootDrop,
    stats: UserStats,
    streak: Streak | None = None,
) -> tuple[UserStats, Streak | None]:
    """Apply a loot drop: extra XP to stats, or shields to the streak.

    A shield drop with no streak to hold it is converted to nothing; the
    caller decides whether to create a streak first.
    """
    match loot.type:
        case LootType.XP_BONUS:
            stats = grant_xp(stats, loot.value)
        case LootType.STREAK_SHIELD if streak is not None:
            streak = add_streak_shield(streak, loot.value)
        case LootType.STREAK_SHIELD:
            logger.warning(f"Shield loot {loot.id} claimed without a streak")
    return stats, streak


def get_celebration_message(kind: str, *, rng: RandomSource = system_random) -> str:
    """Random celebration line for "task", "chain", "quest", "level" or "achievement"."""
    return choose(_CELEBRATIONS.get(kind, _CELEBRATIONS["task"]), rng)
