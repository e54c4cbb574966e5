"""Day evaluation: classify a finished day, record it, and set up minimum viable days."""

import logging
from collections.abc import Iterable
from datetime import date

from momentum.core.clock import Clock, local_date, system_clock
from momentum.core.config import constants
from momentum.core.errors import ensure_energy_level
from momentum.core.logging import span
from momentum.domain.day import DayRating, DayType, MinimumViableDay
from momentum.domain.progress import UserStats
from momentum.domain.task import PRIORITY_ORDER, Task, TaskStatus
from momentum.models.service_models import DayEvaluation
from momentum.services.task_service import new_id


logger = logging.getLogger(__name__)

_DAY_MESSAGES: dict[DayType, str] = {
    DayType.PERFECT: "Perfect day! You crushed it! 🌟",
    DayType.GOOD: "Good day! Solid progress. 👍",
    DayType.OKAY: "Okay day. Every win counts! ✓",
    DayType.MINIMUM_VIABLE: "Minimum viable day done. Not zero! 💪",
    DayType.ZERO: "Rest day. Tomorrow is a fresh start. 🌅",
}


def tasks_for_day(tasks: Iterable[Task], day: date, *, clock: Clock = system_clock) -> list[Task]:
    """Tasks planned for day (scheduled, or created when unscheduled) plus any completed on day."""
    now = clock.now()
    return [
        t
        for t in tasks
        if local_date(t.scheduled_for or t.created_at, now) == day
        or (t.completed_at is not None and local_date(t.completed_at, now) == day)
    ]


def _mvd_achieved(completed: list[Task], minimum_viable_day: MinimumViableDay | None) -> bool:
    if minimum_viable_day is None:
        return bool(completed)
    mvd_ids = set(minimum_viable_day.task_ids)
    return any(t.id in mvd_ids or t.parent_task_id in mvd_ids for t in completed)


def classify_day(tasks_completed: int, tasks_planned: int, mvd_achieved: bool) -> DayType:
    """Map day figures to exactly one day type; first matching rule wins."""
    rate = tasks_completed / tasks_planned if tasks_planned > 0 else 0.0

    if rate >= constants.PERFECT_DAY_RATE and tasks_planned >= constants.PERFECT_DAY_MIN_PLANNED:
        return DayType.PERFECT
    if rate >= constants.GOOD_DAY_RATE:
        return DayType.GOOD
    if rate >= constants.OKAY_DAY_RATE or tasks_completed >= constants.OKAY_DAY_MIN_COMPLETED:
        return DayType.OKAY
    if mvd_achieved or tasks_completed >= 1:
        return DayType.MINIMUM_VIABLE
    return DayType.ZERO


def evaluate_day(
    day_tasks: Iterable[Task],
    minimum_viable_day: MinimumViableDay | None = None,
) -> DayEvaluation:
    """Classify a finished day.

    Skipped tasks are not counted as planned. With nothing planned the
    completion rate is 0 and the day falls through to the MVD and zero rules.
    """
    with span("day_service.evaluate_day"):
        day_tasks = list(day_tasks)
        completed = [t for t in day_tasks if t.status == TaskStatus.COMPLETED]
        planned = [t for t in day_tasks if t.status != TaskStatus.SKIPPED]

        tasks_completed = len(completed)
        tasks_planned = len(planned)
        mvd_achieved = _mvd_achieved(completed, minimum_viable_day)
        day_type = classify_day(tasks_completed, tasks_planned, mvd_achieved)

        logger.info(f"Day evaluated as {day_type}: {tasks_completed}/{tasks_planned} tasks")

        return DayEvaluation(
            type=day_type,
            tasks_completed=tasks_completed,
            tasks_planned=tasks_planned,
            completion_rate=tasks_completed / tasks_planned if tasks_planned > 0 else 0.0,
            mvd_achieved=mvd_achieved,
            message=_DAY_MESSAGES[day_type],
            xp_earned=sum(t.base_xp for t in completed),
        )


def create_day_rating(
    evaluation: DayEvaluation,
    energy_level: int,
    notes: str | None = None,
    *,
    clock: Clock = system_clock,
) -> DayRating:
    """Freeze an evaluation into the append-only rating log."""
    ensure_energy_level(energy_level, field="energy_level")
    return DayRating(
        id=new_id(),
        date=clock.now(),
        type=evaluation.type,
        energy_level=energy_level,
        tasks_completed=evaluation.tasks_completed,
        xp_earned=evaluation.xp_earned,
        notes=notes,
    )


def apply_day_rating_to_stats(stats: UserStats, rating: DayRating, rated_days_before: int) -> UserStats:
    """Update day counters and the running average energy with a new rating."""
    update: dict = {
        "average_energy_level": (stats.average_energy_level * rated_days_before + rating.energy_level)
        / (rated_days_before + 1),
    }
    match rating.type:
        case DayType.PERFECT:
            update["perfect_days"] = stats.perfect_days + 1
        case DayType.ZERO:
            update["zero_days"] = stats.zero_days + 1
        case _:
            update["good_enough_days"] = stats.good_enough_days + 1
    return stats.model_copy(update=update)


# ==========================================
# MINIMUM VIABLE DAY
# ==========================================


def create_minimum_viable_day(
    task_ids: list[str],
    description: str = "Do at least one of these to keep your momentum",
) -> MinimumViableDay:
    return MinimumViableDay(id=new_id(), task_ids=list(task_ids), description=description)


def suggest_mvd_tasks(tasks: Iterable[Task]) -> list[Task]:
    """Up to three quick, low-energy pending tasks; recurring habits first."""
    candidates = [
        t for t in tasks if t.status == TaskStatus.PENDING and t.estimated_minutes <= 10 and t.energy_required <= 2
    ]
    candidates.sort(key=lambda t: (not t.is_recurring, PRIORITY_ORDER[t.priority]))
    return candidates[:3]
