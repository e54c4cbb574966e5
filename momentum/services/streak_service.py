"""Streak ledger: consecutive-day continuity with forgiveness shields.

States are implicit in (current_count, last_activity_date):
- zero: count is 0
- active: count > 0 and last activity today or yesterday
- recoverable: the gap is longer, but available shields cover the missed days
- broken: the gap is longer than the shields can cover

`advance_streak` runs once per day-boundary check, not per task. Gaps are
measured in calendar days in the clock's timezone.
"""

import logging
from enum import StrEnum

from momentum.core.clock import Clock, days_between, local_date, system_clock
from momentum.core.config import constants, settings
from momentum.core.errors import ErrorCategory, InvalidStateError, ensure_non_negative
from momentum.core.logging import log_with_context, span
from momentum.domain.progress import Streak, StreakType, UserStats
from momentum.services.task_service import new_id


logger = logging.getLogger(__name__)


class StreakState(StrEnum):
    """Implicit streak state."""

    ZERO = "zero"
    ACTIVE = "active"
    RECOVERABLE = "recoverable"
    BROKEN = "broken"


def create_streak(
    streak_type: StreakType = StreakType.DAILY,
    *,
    shields: int | None = None,
    clock: Clock = system_clock,
) -> Streak:
    """New zero-count streak with the configured starting shields."""
    now = clock.now()
    return Streak(
        id=new_id(),
        type=streak_type,
        last_activity_date=now,
        shields_available=settings.starting_streak_shields if shields is None else shields,
        started_at=now,
    )


def days_since_activity(streak: Streak, *, clock: Clock = system_clock) -> int:
    """Calendar days between the last qualifying activity and today.

    Raises:
        InvalidStateError: If the last activity date is in the future
    """
    now = clock.now()
    days = days_between(now.date(), local_date(streak.last_activity_date, now))
    if days < 0:
        msg = f"Streak {streak.id} has last activity {streak.last_activity_date.isoformat()} in the future"
        raise InvalidStateError(msg, category=ErrorCategory.FUTURE_ACTIVITY_DATE)
    return days


def advance_streak(
    streak: Streak,
    tasks_completed_today: int,
    minimum_required: int | None = None,
    *,
    clock: Clock = system_clock,
) -> Streak:
    """Apply one day-boundary evaluation to a streak.

    - Same day: a qualifying day refreshes the activity date.
    - Next day: a qualifying day extends the count.
    - Longer gap: shields covering every missed day are consumed and the count
      extends; otherwise the run restarts at 1 (qualifying) or 0.
    - A non-qualifying next day changes nothing yet; it is judged on a later day.

    Raises:
        InvalidStateError: If the last activity date is in the future
        InvalidArgumentError: If tasks_completed_today is negative
    """
    with span("streak_service.advance_streak"):
        ensure_non_negative(tasks_completed_today, field="tasks_completed_today")
        minimum = settings.streak_minimum_tasks if minimum_required is None else minimum_required
        qualifies = tasks_completed_today >= minimum

        days = days_since_activity(streak, clock=clock)
        now = clock.now()

        if days == 0:
            if qualifies:
                return streak.model_copy(update={"last_activity_date": now})
            return streak

        if days == 1:
            if not qualifies:
                return streak
            new_count = streak.current_count + 1
            log_with_context(logger, "info", "Streak extended", streak_id=streak.id, count=new_count)
            return streak.model_copy(
                update={
                    "current_count": new_count,
                    "longest_count": max(new_count, streak.longest_count),
                    "last_activity_date": now,
                }
            )

        missed = days - 1
        if streak.shields_available >= missed:
            new_count = streak.current_count + 1
            log_with_context(
                logger, "info", "Shields covered missed days", streak_id=streak.id, shields=missed, count=new_count
            )
            return streak.model_copy(
                update={
                    "shields_available": streak.shields_available - missed,
                    "shields_used": streak.shields_used + missed,
                    "current_count": new_count,
                    "longest_count": max(new_count, streak.longest_count),
                    "last_activity_date": now,
                }
            )

        log_with_context(
            logger, "info", "Streak restarted", streak_id=streak.id, missed_days=missed, previous=streak.current_count
        )
        return streak.model_copy(
            update={
                "current_count": 1 if qualifies else 0,
                "longest_count": max(1 if qualifies else 0, streak.longest_count),
                "last_activity_date": now,
                "started_at": now,
            }
        )


def add_streak_shield(streak: Streak, count: int = 1) -> Streak:
    """Grant shields; they persist until a gap consumes them."""
    ensure_non_negative(count, field="shield count")
    return streak.model_copy(update={"shields_available": streak.shields_available + count})


def get_visible_streak(streak: Streak) -> int:
    """Count shown to the user, capped so a long streak never reads as a big loss."""
    return min(streak.current_count, constants.MAX_VISIBLE_STREAK)


def streak_state(streak: Streak, *, clock: Clock = system_clock) -> StreakState:
    """Name the streak's implicit state."""
    if streak.current_count == 0:
        return StreakState.ZERO
    days = days_since_activity(streak, clock=clock)
    if days <= 1:
        return StreakState.ACTIVE
    if streak.shields_available >= days - 1:
        return StreakState.RECOVERABLE
    return StreakState.BROKEN


def apply_streak_to_stats(stats: UserStats, streak: Streak) -> UserStats:
    """Copy a daily streak's counts into the user's stats."""
    return stats.model_copy(
        update={
            "current_streak": streak.current_count,
            "longest_streak": max(stats.longest_streak, streak.longest_count),
        }
    )
