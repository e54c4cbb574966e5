"""Shame-free recovery after missed days.

This module provides functions for:
- Welcome-back copy after a gap of any length (never loss framing)
- Recomputing a streak from the day rating log
- Tracking recoveries and their XP bonus
- Finding past wins at a similar energy level
- Best-effort pattern detection over the rating log
- The restart ceremony
"""

import calendar
import logging
from collections import defaultdict
from collections.abc import Iterable, Sequence

from momentum.core.clock import Clock, as_local, days_between, local_date, system_clock
from momentum.core.config import constants
from momentum.core.errors import InvalidStateError, ensure_energy_level, ensure_non_negative
from momentum.core.logging import span
from momentum.domain.day import DayRating, DayType, Recovery
from momentum.domain.task import Task, TaskPriority, TaskStatus
from momentum.models.service_models import (
    PastWin,
    ProductivityPattern,
    RestartCeremony,
    StreakAnalysis,
    WelcomeBack,
)
from momentum.services.task_service import new_id


logger = logging.getLogger(__name__)

_GOOD_DAYS = {DayType.PERFECT, DayType.GOOD}
_SUCCESSFUL_DAYS = {DayType.PERFECT, DayType.GOOD, DayType.OKAY}


def get_welcome_back_message(days_missed: int) -> WelcomeBack:
    """Reassuring copy for a user returning after days_missed days.

    Raises:
        InvalidArgumentError: If days_missed is negative
    """
    ensure_non_negative(days_missed, field="days_missed")

    if days_missed == 0:
        return WelcomeBack(
            message="Welcome back!",
            sub_message="Ready to build some momentum?",
            suggested_action="Start with your easiest task",
        )
    if days_missed == 1:
        return WelcomeBack(
            message="Hey, you're back!",
            sub_message="A day off is totally fine. Everything you built is still here.",
            suggested_action="Do one small thing to get moving",
        )
    if days_missed <= 3:
        return WelcomeBack(
            message="Welcome back!",
            sub_message=f"{days_missed} days away? That's nothing. Your momentum is right where you left it.",
            suggested_action="Start with something you can finish in 2 minutes",
        )
    if days_missed <= 7:
        return WelcomeBack(
            message="Look who's back!",
            sub_message="A week away happens to everyone. Everything's ready when you are.",
            suggested_action="Start fresh with your minimum viable day",
        )
    if days_missed <= 30:
        return WelcomeBack(
            message="Hey! Great to see you!",
            sub_message="It's been a while, and that's okay. No judgment here, just progress.",
            suggested_action="What's one thing you can do right now?",
        )
    return WelcomeBack(
        message="Welcome home!",
        sub_message="However long it's been, you're here now, and that's what counts.",
        suggested_action="Let's restart together. Pick anything, no matter how small.",
    )


# ==========================================
# STREAK ANALYSIS
# ==========================================


def analyze_streak(
    day_ratings: Iterable[DayRating],
    shields_available: int,
    *,
    clock: Clock = system_clock,
) -> StreakAnalysis:
    """Recompute streak status from the rating log, most recent day first.

    Consecutive non-zero days are counted; the walk stops at the first zero
    day that follows a gap of more than one day.
    """
    with span("recovery_service.analyze_streak"):
        ensure_non_negative(shields_available, field="shields_available")
        now = clock.now()
        ratings = sorted(day_ratings, key=lambda r: as_local(r.date, now), reverse=True)

        if not ratings:
            return StreakAnalysis(
                current_streak=0,
                days_since_last_activity=0,
                is_streak_broken=False,
                can_recover=True,
                recovery_message="You're just getting started! Complete a task to begin your streak.",
            )

        today = now.date()
        days_since = days_between(today, local_date(ratings[0].date, now))
        if days_since < 0:
            msg = f"Day rating {ratings[0].id} is dated in the future"
            raise InvalidStateError(msg)

        streak = 0
        previous = today
        for rating in ratings:
            rating_day = local_date(rating.date, now)
            if days_between(previous, rating_day) > 1 and rating.type == DayType.ZERO:
                break
            if rating.type != DayType.ZERO:
                streak += 1
            previous = rating_day

        is_broken = days_since > 1
        can_recover = is_broken and shields_available >= days_since - 1

        if not is_broken:
            if streak > 0:
                message = f"{streak}-day streak going strong! Keep it up!"
            else:
                message = "Complete a task today to start your streak!"
        elif can_recover:
            needed = days_since - 1
            message = f"Use {needed} streak shield{'s' if needed > 1 else ''} to protect your streak!"
        else:
            message = "Streak paused, and that's okay! Start fresh today."

        return StreakAnalysis(
            current_streak=0 if is_broken and not can_recover else streak,
            days_since_last_activity=days_since,
            is_streak_broken=is_broken,
            can_recover=can_recover,
            recovery_message=message,
        )


# ==========================================
# RECOVERY TRACKING
# ==========================================


def start_recovery(days_missed: int, *, clock: Clock = system_clock) -> Recovery:
    """Open a recovery when the user returns after zero days."""
    ensure_non_negative(days_missed, field="days_missed")
    logger.info(f"Recovery started after {days_missed} missed days")
    return Recovery(id=new_id(), started_at=clock.now(), days_missed=days_missed)


def complete_recovery(recovery: Recovery, task_id: str, *, clock: Clock = system_clock) -> Recovery:
    """Close a recovery with the first task done after the gap."""
    if recovery.successful:
        msg = f"Recovery {recovery.id} is already complete"
        raise InvalidStateError(msg)
    return recovery.model_copy(update={"ended_at": clock.now(), "recovery_task_id": task_id, "successful": True})


def get_recovery_xp(days_missed: int) -> int:
    """XP for coming back; grows with the gap but is capped."""
    ensure_non_negative(days_missed, field="days_missed")
    bonus = min(days_missed * constants.RECOVERY_BONUS_PER_DAY, constants.RECOVERY_BONUS_CAP)
    return constants.RECOVERY_COMPLETE_XP + bonus


# ==========================================
# WIN ARCHAEOLOGY
# ==========================================


def find_similar_past_wins(
    day_ratings: Iterable[DayRating],
    tasks: Sequence[Task],
    current_energy_level: int,
    limit: int = 3,
    *,
    clock: Clock = system_clock,
) -> list[PastWin]:
    """Recent successful days at the same energy level, with their biggest task."""
    ensure_energy_level(current_energy_level, field="current_energy_level")
    now = clock.now()

    similar = sorted(
        (r for r in day_ratings if r.energy_level == current_energy_level and r.type in _SUCCESSFUL_DAYS),
        key=lambda r: as_local(r.date, now),
        reverse=True,
    )[:limit]

    wins = []
    for rating in similar:
        rating_day = local_date(rating.date, now)
        day_tasks = [t for t in tasks if t.completed_at and local_date(t.completed_at, now) == rating_day]
        top_task = max(day_tasks, key=lambda t: t.base_xp, default=None)
        wins.append(
            PastWin(
                date=rating.date,
                description=top_task.title if top_task else f"Completed {rating.tasks_completed} tasks",
                energy_level=rating.energy_level,
                tasks_completed=rating.tasks_completed,
            )
        )
    return wins


# ==========================================
# PATTERN DETECTION
# ==========================================


def detect_patterns(
    day_ratings: Sequence[DayRating],
    *,
    clock: Clock = system_clock,
) -> list[ProductivityPattern]:
    """Advisory observations; empty until there is at least a week of ratings.

    Weekdays are read in the clock's timezone.
    """
    patterns: list[ProductivityPattern] = []
    if len(day_ratings) < constants.PATTERN_MIN_RATINGS:
        return patterns

    now = clock.now()
    localized = [(local_date(r.date, now).weekday(), r) for r in day_ratings]

    by_weekday: dict[int, list[int]] = defaultdict(lambda: [0, 0])
    for weekday, rating in localized:
        counts = by_weekday[weekday]
        counts[0] += 1 if rating.type in _GOOD_DAYS else 0
        counts[1] += 1

    best_day, best_rate = None, 0.0
    for weekday, (good, total) in sorted(by_weekday.items()):
        rate = good / total
        if total >= 2 and rate > best_rate:
            best_day, best_rate = weekday, rate

    if best_day is not None and best_rate > 0.6:
        name = calendar.day_name[best_day]
        patterns.append(
            ProductivityPattern(
                type="positive",
                pattern=f"{name}s are your power days!",
                suggestion=f"Schedule important tasks on {name}s when you can.",
            )
        )

    low_energy = [r for r in day_ratings if r.energy_level <= 2]
    if len(low_energy) >= 3:
        still_productive = [r for r in low_energy if r.type in (DayType.OKAY, DayType.MINIMUM_VIABLE)]
        if len(still_productive) >= 2:
            patterns.append(
                ProductivityPattern(
                    type="positive",
                    pattern="You get things done even on low-energy days!",
                    suggestion="Keep your minimum viable day tasks ready for tough days.",
                )
            )

    weekend = [r for weekday, r in localized if weekday >= 5]
    weekend_zeros = [r for r in weekend if r.type == DayType.ZERO]
    if len(weekend) >= 4 and len(weekend_zeros) >= len(weekend) * 0.5:
        patterns.append(
            ProductivityPattern(
                type="warning",
                pattern="Weekends tend to be rest days for you.",
                suggestion="Consider lighter weekend goals, or plan your rest on purpose.",
            )
        )

    return patterns


# ==========================================
# RESTART CEREMONY
# ==========================================


def initiate_restart(tasks: Iterable[Task], message: str = "I'm starting fresh.") -> RestartCeremony:
    """Fresh start with the easiest worthwhile quick task as the first action."""

    def ease_score(task: Task) -> int:
        return (5 - task.energy_required) + (3 if task.priority == TaskPriority.HIGH else 0)

    candidates = [t for t in tasks if t.status == TaskStatus.PENDING and t.estimated_minutes <= 5]
    candidates.sort(key=ease_score, reverse=True)

    return RestartCeremony(
        acknowledgment="Slate wiped clean. The past doesn't define what comes next.",
        intention=message,
        first_action=candidates[0] if candidates else None,
        new_streak_started=True,
    )
