"""User context snapshots, context-based task filters and focus sessions."""

import logging
from collections.abc import Iterable

from pydantic import BaseModel

from momentum.core.clock import Clock, TimeOfDay, as_local, system_clock, time_of_day_for
from momentum.core.config import constants
from momentum.core.errors import InvalidArgumentError, InvalidStateError, ensure_energy_level
from momentum.core.logging import span
from momentum.core.randomness import RandomSource, shuffled, system_random
from momentum.domain.context import FocusSession, Location, Mood, UserContext
from momentum.domain.task import PRIORITY_ORDER, EnergyLevel, Task, TaskContext, TaskPriority, TaskStatus
from momentum.models.service_models import EnergyBasedSuggestion, TimeFit
from momentum.services.scoring_service import matches_mood, time_of_day_reason
from momentum.services.task_service import new_id


logger = logging.getLogger(__name__)

# Broader than the scoring map: devices a user usually has at each location.
LOCATION_FILTER_CONTEXTS: dict[Location, frozenset[TaskContext]] = {
    Location.HOME: frozenset({TaskContext.HOME, TaskContext.COMPUTER, TaskContext.PHONE}),
    Location.WORK: frozenset({TaskContext.WORK, TaskContext.COMPUTER, TaskContext.PHONE}),
    Location.TRANSIT: frozenset({TaskContext.PHONE}),
    Location.ERRAND: frozenset({TaskContext.ERRAND, TaskContext.PHONE}),
    Location.OTHER: frozenset({TaskContext.PHONE}),
}


class ContextUpdate(BaseModel):
    """Fields a user can report; unset fields keep their previous value."""

    location: Location | None = None
    energy_level: EnergyLevel | None = None
    mood: Mood | None = None
    available_minutes: int | None = None
    is_in_focus_mode: bool | None = None
    current_task_id: str | None = None


def _time_fields(clock: Clock) -> dict:
    now = clock.now()
    return {"timestamp": now, "time_of_day": time_of_day_for(now.hour), "day_of_week": now.weekday()}


def create_initial_context(*, clock: Clock = system_clock) -> UserContext:
    """Fresh context with only the time-derived fields set."""
    return UserContext(**_time_fields(clock))


def update_context(
    current: UserContext,
    update: ContextUpdate | None = None,
    *,
    clock: Clock = system_clock,
) -> UserContext:
    """Apply reported fields and always recompute time of day and weekday from now."""
    fields = update.model_dump(exclude_unset=True) if update is not None else {}
    ensure_energy_level(fields.get("energy_level"), field="energy_level")
    return current.model_copy(update={**fields, **_time_fields(clock)})


def _pending(tasks: Iterable[Task]) -> list[Task]:
    return [t for t in tasks if t.status == TaskStatus.PENDING]


def get_energy_matched_tasks(tasks: Iterable[Task], energy_level: int) -> list[EnergyBasedSuggestion]:
    """Group pending tasks into categories suited to an energy level."""
    ensure_energy_level(energy_level, field="energy_level")
    pending = _pending(tasks)
    suggestions: list[EnergyBasedSuggestion] = []

    if energy_level <= 2:
        easy = [t for t in pending if t.energy_required <= 2 and t.estimated_minutes <= 15]
        if easy:
            suggestions.append(
                EnergyBasedSuggestion(
                    category="Low Energy Mode",
                    tasks=easy[:5],
                    reason="Quick wins that don't need much mental effort",
                )
            )
        routine = [t for t in pending if "admin" in t.tags or "routine" in t.tags]
        if routine:
            suggestions.append(
                EnergyBasedSuggestion(category="Mindless Tasks", tasks=routine[:3], reason="Tasks you can do on autopilot")
            )
    elif energy_level == 3:
        medium = [t for t in pending if t.energy_required <= 3 and t.estimated_minutes <= 30]
        suggestions.append(
            EnergyBasedSuggestion(category="Good Match", tasks=medium[:5], reason="Tasks that match your current energy")
        )
    else:
        challenging = [
            t for t in pending if t.energy_required >= 4 or t.priority in (TaskPriority.CRITICAL, TaskPriority.HIGH)
        ]
        if challenging:
            suggestions.append(
                EnergyBasedSuggestion(
                    category="High Energy Power Hour",
                    tasks=challenging[:5],
                    reason="You've got the energy, so tackle the hard stuff",
                )
            )
        deep_work = [t for t in pending if t.estimated_minutes >= 30 and t.energy_required >= 3]
        if deep_work:
            suggestions.append(
                EnergyBasedSuggestion(
                    category="Deep Work", tasks=deep_work[:3], reason="A good window for focused, challenging work"
                )
            )

    return suggestions


def get_location_matched_tasks(tasks: Iterable[Task], location: Location | None) -> list[Task]:
    """Tasks doable at a location; everything when location is unknown."""
    task_list = list(tasks)
    if location is None:
        return task_list

    allowed = LOCATION_FILTER_CONTEXTS.get(location, frozenset())
    return [t for t in task_list if TaskContext.ANYWHERE in t.contexts or any(c in allowed for c in t.contexts)]


def get_time_fitting_tasks(tasks: Iterable[Task], available_minutes: int) -> TimeFit:
    """Bucket pending tasks by how they fit a time budget."""
    if available_minutes < 0:
        msg = f"Invalid available_minutes: {available_minutes} must not be negative"
        raise InvalidArgumentError(msg)

    pending = _pending(tasks)
    stretch = available_minutes * constants.TIME_FIT_STRETCH
    return TimeFit(
        fits=[t for t in pending if t.estimated_minutes <= available_minutes],
        almost_fits=[t for t in pending if available_minutes < t.estimated_minutes <= stretch],
        too_long=[t for t in pending if t.estimated_minutes > stretch],
    )


def get_time_of_day_suggestions(tasks: Iterable[Task], time_of_day: TimeOfDay) -> list[Task]:
    """Pending tasks suited to a time of day."""
    matching = [t for t in _pending(tasks) if time_of_day_reason(t, time_of_day)]

    if time_of_day == "morning":
        return sorted(matching, key=lambda t: PRIORITY_ORDER[t.priority])
    if time_of_day == "evening":
        matching = [t for t in matching if t.priority not in (TaskPriority.CRITICAL, TaskPriority.HIGH)]
        return matching[:10]
    if time_of_day == "night":
        extra = [t for t in _pending(tasks) if ("planning" in t.tags or "review" in t.tags) and t not in matching]
        return (matching + extra)[:5]
    return matching[:10]


def get_mood_matched_tasks(
    tasks: Iterable[Task],
    mood: Mood | None,
    *,
    rng: RandomSource = system_random,
) -> list[Task]:
    """Pending tasks suited to a mood; shuffled for a scattered mood."""
    pending = _pending(tasks)
    if mood is None:
        return pending

    matching = [t for t in pending if matches_mood(t, mood)]
    if mood == Mood.SCATTERED:
        return shuffled(matching, rng)
    return matching


# ==========================================
# FOCUS MODE
# ==========================================


def start_focus_session(
    duration_minutes: int,
    task_id: str | None = None,
    *,
    clock: Clock = system_clock,
) -> FocusSession:
    """Begin a focus block."""
    with span("context_service.start_focus_session"):
        if duration_minutes < 1:
            msg = f"Invalid duration_minutes: {duration_minutes} must be at least 1"
            raise InvalidArgumentError(msg)
        session = FocusSession(
            id=new_id(),
            task_id=task_id,
            start_time=clock.now(),
            planned_minutes=duration_minutes,
        )
        logger.info(f"Started {duration_minutes} min focus session {session.id}")
        return session


def end_focus_session(
    session: FocusSession,
    completed: bool = True,
    *,
    clock: Clock = system_clock,
) -> FocusSession:
    """Close a focus block, measuring how long it ran."""
    if session.actual_minutes is not None:
        msg = f"Cannot end: focus session {session.id} already ended"
        raise InvalidStateError(msg)

    now = clock.now()
    elapsed = now - as_local(session.start_time, now)
    return session.model_copy(
        update={"actual_minutes": max(0, round(elapsed.total_seconds() / 60)), "completed": completed}
    )


def record_distraction(session: FocusSession) -> FocusSession:
    return session.model_copy(update={"distractions": session.distractions + 1})
