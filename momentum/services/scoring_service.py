"""Smart suggestion scoring.

Each pending task is scored against the user's context as a sum of
independent, capped factors:

- Priority (5-40)
- Energy match (0-25), when the context has an energy level
- Time fit (0-20), when the context has a minutes budget
- Location match (0-15), when the context has a location
- Mood match (0-15), when the context has a mood
- Time-of-day fit (0-10)
- Due date urgency (0-30)
- Quick win (0-10)

No factor is negative, so no score is. Scoring is deterministic; the only
randomness is the candidate shuffle applied for a scattered mood.
"""

import logging
from collections.abc import Iterable

from momentum.core.clock import Clock, TimeOfDay, hours_until, system_clock
from momentum.core.config import constants, settings
from momentum.core.errors import InvalidStateError, ensure_energy_level, ensure_non_negative
from momentum.core.logging import span
from momentum.core.randomness import RandomSource, shuffled, system_random
from momentum.domain.context import Location, Mood, UserContext
from momentum.domain.task import Task, TaskContext, TaskPriority, TaskStatus
from momentum.models.service_models import ScoredSuggestion


logger = logging.getLogger(__name__)

LOCATION_CONTEXTS: dict[Location, frozenset[TaskContext]] = {
    Location.HOME: frozenset({TaskContext.HOME, TaskContext.ANYWHERE}),
    Location.WORK: frozenset({TaskContext.WORK, TaskContext.ANYWHERE}),
    Location.TRANSIT: frozenset({TaskContext.PHONE, TaskContext.ANYWHERE}),
    Location.ERRAND: frozenset({TaskContext.ERRAND, TaskContext.ANYWHERE}),
    Location.OTHER: frozenset({TaskContext.ANYWHERE}),
}

_HIGH_PRIORITIES = (TaskPriority.CRITICAL, TaskPriority.HIGH)


def matches_mood(task: Task, mood: Mood) -> bool:
    """Whether a task suits a mood."""
    match mood:
        case Mood.FOCUSED:
            return task.estimated_minutes >= constants.FOCUSED_MIN_MINUTES or task.energy_required >= 4
        case Mood.SCATTERED:
            return task.estimated_minutes <= constants.SCATTERED_MAX_MINUTES
        case Mood.CREATIVE:
            return any(tag in constants.CREATIVE_TAGS for tag in task.tags)
        case Mood.TIRED:
            return task.energy_required == 1 and task.estimated_minutes <= constants.TIRED_MAX_MINUTES
        case Mood.ANXIOUS:
            return task.estimated_minutes <= constants.ANXIOUS_MAX_MINUTES and "creative" not in task.tags
        case Mood.MOTIVATED:
            return task.priority in _HIGH_PRIORITIES
    return False


def time_of_day_reason(task: Task, time_of_day: TimeOfDay) -> str | None:
    """Reason the task suits this time of day, or None."""
    match time_of_day:
        case "morning":
            if task.priority in _HIGH_PRIORITIES:
                return "Morning is for priorities"
            if task.energy_required >= 4:
                return "Best time for hard work"
        case "afternoon":
            if 2 <= task.energy_required <= 4:
                return "Good afternoon task"
        case "evening":
            if task.energy_required <= 3:
                return "Light evening task"
        case "night":
            if task.energy_required <= 2:
                return "Night-appropriate"
    return None


def matches_location(task: Task, location: Location) -> bool:
    """Whether any of the task's contexts is allowed at location; "anywhere" always is."""
    allowed = LOCATION_CONTEXTS.get(location, frozenset({TaskContext.ANYWHERE}))
    return any(c == TaskContext.ANYWHERE or c in allowed for c in task.contexts)


def urgency_bonus(hours_left: float) -> tuple[int, str | None]:
    """Bonus and reason for a due date hours_left away."""
    if hours_left < 0:
        return constants.URGENCY_OVERDUE, "Overdue"
    for window_hours, bonus in constants.URGENCY_WINDOWS:
        if hours_left < window_hours:
            reason = {24: "Due today", 72: "Due soon", 168: "Due this week"}.get(window_hours)
            return bonus, reason
    return 0, None


def score_task(task: Task, context: UserContext, *, clock: Clock = system_clock) -> ScoredSuggestion:
    """Score one pending task against the context.

    Raises:
        InvalidStateError: If the task is not pending
        InvalidArgumentError: If the task or context energy is outside 1-5
    """
    if task.status != TaskStatus.PENDING:
        msg = f"Cannot score: task {task.id} is {task.status}, only pending tasks are suggested"
        raise InvalidStateError(msg)
    ensure_energy_level(task.energy_required, field="task energy_required")
    ensure_energy_level(context.energy_level, field="context energy_level")

    score = 0
    reasons: list[str] = []

    score += constants.PRIORITY_SCORES[task.priority]
    if task.priority in _HIGH_PRIORITIES:
        reasons.append(f"{task.priority.capitalize()} priority")

    if context.energy_level is not None:
        diff = abs(task.energy_required - context.energy_level)
        score += max(0, constants.ENERGY_MATCH_MAX - diff * constants.ENERGY_MISMATCH_PENALTY)
        if diff == 0:
            reasons.append("Perfect energy match")

    if context.available_minutes is not None:
        if task.estimated_minutes <= context.available_minutes:
            score += constants.TIME_FIT_FULL
            reasons.append(f"Fits in {context.available_minutes} min")
        elif task.estimated_minutes <= context.available_minutes * constants.TIME_FIT_STRETCH:
            score += constants.TIME_FIT_PARTIAL

    if context.location is not None and matches_location(task, context.location):
        score += constants.LOCATION_MATCH
        reasons.append("Location appropriate")

    if context.mood is not None and matches_mood(task, context.mood):
        score += constants.MOOD_MATCH
        reasons.append(f"Good for a {context.mood} mood")

    tod_reason = time_of_day_reason(task, context.time_of_day)
    if tod_reason:
        score += constants.TIME_OF_DAY_MATCH
        reasons.append(tod_reason)

    if task.due_date is not None:
        bonus, reason = urgency_bonus(hours_until(task.due_date, clock.now()))
        score += bonus
        if reason:
            reasons.append(reason)

    if task.estimated_minutes <= constants.QUICK_WIN_MAX_MINUTES:
        score += constants.QUICK_WIN
        reasons.append("Quick win")

    return ScoredSuggestion(task_id=task.id, score=score, reasons=reasons)


def get_smart_suggestions(
    tasks: Iterable[Task],
    context: UserContext,
    limit: int | None = None,
    *,
    clock: Clock = system_clock,
    rng: RandomSource = system_random,
) -> list[ScoredSuggestion]:
    """Rank pending tasks for the current moment, best first.

    Ties keep input order (the sort is stable). For a scattered mood the
    candidates are shuffled first, so ties surface in varied order.
    """
    with span("scoring_service.get_smart_suggestions"):
        limit = settings.suggestion_limit if limit is None else limit
        ensure_non_negative(limit, field="limit")

        candidates = [t for t in tasks if t.status == TaskStatus.PENDING]
        if context.mood == Mood.SCATTERED:
            candidates = shuffled(candidates, rng)

        scored = [score_task(task, context, clock=clock) for task in candidates]
        ranked = sorted(scored, key=lambda s: s.score, reverse=True)

        logger.debug(f"Scored {len(scored)} pending tasks, returning top {min(limit, len(ranked))}")
        return ranked[:limit]
