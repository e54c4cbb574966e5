"""Orchestration over a user's MomentumState snapshot.

Each function takes a snapshot and returns a new one inside an outcome model;
the input snapshot is never mutated. The host persists whatever it gets back.
"""

import logging
from datetime import date, datetime

from momentum.core.clock import Clock, as_local, local_date, system_clock
from momentum.core.config import settings
from momentum.core.errors import InvalidArgumentError
from momentum.core.logging import log_with_user_context, span
from momentum.core.randomness import RandomSource, system_random
from momentum.domain.day import DayType
from momentum.domain.progress import Streak, StreakType, UserStats
from momentum.domain.reward import Achievement, QuestType, UserAchievement
from momentum.domain.state import MomentumState
from momentum.domain.task import Task, TaskStatus
from momentum.models.service_models import CompletionOutcome, DayCloseOutcome
from momentum.services.achievement_service import check_for_new_achievements, create_user_achievement
from momentum.services.chain_service import is_chain_complete, record_chain_completion
from momentum.services.day_service import (
    apply_day_rating_to_stats,
    create_day_rating,
    evaluate_day,
    tasks_for_day,
)
from momentum.services.quest_service import update_quest_progress
from momentum.services.recovery_service import get_welcome_back_message
from momentum.services.reward_service import (
    apply_xp_reward,
    calculate_task_xp,
    claim_loot_drop,
    grant_xp,
    is_early_bird,
    is_night_owl,
)
from momentum.services.streak_service import (
    advance_streak,
    apply_streak_to_stats,
    create_streak,
    days_since_activity,
)
from momentum.services.task_service import complete_task, spawn_next_occurrence


logger = logging.getLogger(__name__)


def get_daily_streak(state: MomentumState) -> Streak | None:
    return next((s for s in state.streaks if s.type == StreakType.DAILY), None)


def _replace_streak(streaks: list[Streak], streak: Streak) -> list[Streak]:
    if any(s.id == streak.id for s in streaks):
        return [streak if s.id == streak.id else s for s in streaks]
    return [*streaks, streak]


def _find_task(state: MomentumState, task_id: str) -> Task:
    task = next((t for t in state.tasks if t.id == task_id), None)
    if task is None:
        msg = f"Unknown task {task_id} for user {state.user_id}"
        raise InvalidArgumentError(msg)
    return task


def _unlock_achievements(
    stats: UserStats,
    existing: list[UserAchievement],
    *,
    clock: Clock,
) -> tuple[UserStats, list[UserAchievement], list[Achievement]]:
    """Record new unlocks and grant their XP."""
    earned = check_for_new_achievements(stats, existing)
    unlocked = [*existing, *(create_user_achievement(a, clock=clock) for a in earned)]
    for achievement in earned:
        stats = grant_xp(stats, achievement.xp_reward)
    return stats, unlocked, earned


def _completed_on(tasks: list[Task], day: date, now: datetime) -> int:
    """Tasks completed on day, whenever they were planned."""
    return sum(
        1
        for t in tasks
        if t.status == TaskStatus.COMPLETED and t.completed_at is not None and local_date(t.completed_at, now) == day
    )


def _is_recovery(state: MomentumState, completed_task_id: str, clock: Clock) -> bool:
    """First completion of the day after a zero day."""
    if not state.day_ratings:
        return False
    now = clock.now()
    latest = max(state.day_ratings, key=lambda r: as_local(r.date, now))
    if latest.type != DayType.ZERO or local_date(latest.date, now) == now.date():
        return False
    return not any(
        t.id != completed_task_id
        and t.status == TaskStatus.COMPLETED
        and t.completed_at is not None
        and local_date(t.completed_at, now) == now.date()
        for t in state.tasks
    )


def record_task_completion(
    state: MomentumState,
    task_id: str,
    *,
    clock: Clock = system_clock,
    rng: RandomSource = system_random,
) -> CompletionOutcome:
    """Complete a task and apply everything that follows from it.

    Rewards XP (with the daily streak bonus), claims any loot drop, updates
    counters, chains and quests, unlocks achievements and spawns the next
    instance of a recurring task. The streak itself is only advanced by
    `close_day`.

    Raises:
        InvalidArgumentError: If the task is not in the snapshot
        InvalidStateError: If the task cannot be completed
    """
    with span("state_service.record_task_completion"):
        task = complete_task(_find_task(state, task_id), clock=clock)
        tasks = [task if t.id == task_id else t for t in state.tasks]
        streak = get_daily_streak(state)
        recovery = _is_recovery(state, task_id, clock)

        reward = calculate_task_xp(task, state.stats, streak, clock=clock, rng=rng)
        stats = apply_xp_reward(state.stats, reward)
        if reward.loot_drop is not None:
            stats, streak = claim_loot_drop(reward.loot_drop, stats, streak)

        hour = clock.now().hour
        stats = stats.model_copy(
            update={
                "total_tasks_completed": stats.total_tasks_completed + 1,
                "early_bird_completions": stats.early_bird_completions + (1 if is_early_bird(hour) else 0),
                "night_owl_completions": stats.night_owl_completions + (1 if is_night_owl(hour) else 0),
                "recoveries": stats.recoveries + (1 if recovery else 0),
            }
        )

        chains = state.chains
        chain_completed = False
        chain = next((c for c in state.chains if c.id == task.chain_id), None) if task.chain_id else None
        if chain is not None and chain.is_active and is_chain_complete(chain, tasks):
            members = [t for t in tasks if t.id in set(chain.task_ids)]
            minutes = sum(t.actual_minutes or 0 for t in members)
            chains = [record_chain_completion(chain, minutes) if c.id == chain.id else c for c in chains]
            stats = stats.model_copy(update={"total_chains_completed": stats.total_chains_completed + 1})
            chain_completed = True

        daily_quest = state.daily_quest
        if daily_quest is not None:
            daily_quest = update_quest_progress(daily_quest, QuestType.COMPLETE_TASKS, 1)
            daily_quest = update_quest_progress(daily_quest, QuestType.EARN_XP, reward.total)
            daily_quest = update_quest_progress(daily_quest, QuestType.MAINTAIN_STREAK, 1)
            if chain_completed:
                daily_quest = update_quest_progress(daily_quest, QuestType.CHAIN_COMPLETION, 1)

        stats, achievements, earned = _unlock_achievements(stats, state.achievements, clock=clock)

        next_task = spawn_next_occurrence(task, clock=clock)
        if next_task is not None:
            tasks.append(next_task)

        log_with_user_context(
            logger,
            "info",
            "Task completion recorded",
            user_id=state.user_id,
            task_id=task.id,
            xp=reward.total,
            achievements=len(earned),
        )

        new_state = state.model_copy(
            update={
                "tasks": tasks,
                "chains": chains,
                "stats": stats,
                "streaks": state.streaks if streak is None else _replace_streak(state.streaks, streak),
                "achievements": achievements,
                "daily_quest": daily_quest,
            }
        )
        return CompletionOutcome(
            state=new_state,
            task=task,
            reward=reward,
            new_achievements=earned,
            next_occurrence=next_task,
            chain_completed=chain_completed,
            is_recovery=recovery,
        )


def close_day(
    state: MomentumState,
    energy_level: int,
    notes: str | None = None,
    *,
    clock: Clock = system_clock,
) -> DayCloseOutcome:
    """Rate today, advance the daily streak and unlock any day-based achievements.

    A welcome-back message is included when the streak had a gap longer than
    one day.

    Raises:
        InvalidArgumentError: If energy_level is outside 1-5
        InvalidStateError: If the streak's last activity is in the future
    """
    with span("state_service.close_day"):
        now = clock.now()
        today = now.date()
        evaluation = evaluate_day(tasks_for_day(state.tasks, today, clock=clock), state.minimum_viable_day)
        rating = create_day_rating(evaluation, energy_level, notes, clock=clock)
        stats = apply_day_rating_to_stats(state.stats, rating, len(state.day_ratings))
        completed_today = _completed_on(state.tasks, today, now)

        streak = get_daily_streak(state)
        if streak is None:
            # First close ever: a qualifying day opens the streak at 1.
            gap = 0
            streak = create_streak(StreakType.DAILY, clock=clock)
            if completed_today >= settings.streak_minimum_tasks:
                streak = streak.model_copy(update={"current_count": 1, "longest_count": 1})
        else:
            gap = days_since_activity(streak, clock=clock)
            streak = advance_streak(streak, completed_today, clock=clock)
        stats = apply_streak_to_stats(stats, streak)

        stats, achievements, earned = _unlock_achievements(stats, state.achievements, clock=clock)
        welcome_back = get_welcome_back_message(gap - 1) if gap > 1 else None

        log_with_user_context(
            logger,
            "info",
            "Day closed",
            user_id=state.user_id,
            day_type=str(rating.type),
            streak=streak.current_count,
        )

        new_state = state.model_copy(
            update={
                "stats": stats,
                "streaks": _replace_streak(state.streaks, streak),
                "day_ratings": [*state.day_ratings, rating],
                "achievements": achievements,
            }
        )
        return DayCloseOutcome(
            state=new_state,
            evaluation=evaluation,
            rating=rating,
            new_achievements=earned,
            welcome_back=welcome_back,
        )
