"""Task lifecycle and task-list utilities.

This module provides functions for:
- Creating tasks (base XP is fixed from priority at creation)
- Lifecycle transitions: start, complete, skip, defer
- Quick capture from free text
- Micro-action breakdown, the daily Big 3 and task-list statistics
- Spawning the next instance of a recurring task
"""

import logging
import math
import re
import uuid
from collections.abc import Iterable
from datetime import datetime, timedelta

from momentum.core.clock import Clock, as_local, local_date, system_clock
from momentum.core.config import constants, settings
from momentum.core.errors import InvalidStateError, ensure_energy_level
from momentum.core.logging import span
from momentum.core.recurrence import next_occurrence
from momentum.domain.task import (
    PRIORITY_ORDER,
    RecurrenceRule,
    Task,
    TaskContext,
    TaskPriority,
    TaskStatus,
)
from momentum.models.service_models import TaskStats


logger = logging.getLogger(__name__)

_COMPLETABLE_STATES = {TaskStatus.PENDING, TaskStatus.IN_PROGRESS}
_STARTABLE_STATES = {TaskStatus.PENDING, TaskStatus.DEFERRED}

_WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]


def new_id() -> str:
    """Generate a unique record ID."""
    return uuid.uuid4().hex


def calculate_base_xp(priority: TaskPriority) -> int:
    """Base XP for a priority."""
    return constants.BASE_XP[priority]


def create_task(
    title: str,
    *,
    priority: TaskPriority = TaskPriority.MEDIUM,
    estimated_minutes: int | None = None,
    due_date: datetime | None = None,
    scheduled_for: datetime | None = None,
    energy_required: int = 3,
    contexts: list[TaskContext] | None = None,
    tags: list[str] | None = None,
    description: str | None = None,
    chain_id: str | None = None,
    chain_order: int | None = None,
    recurrence_rule: RecurrenceRule | None = None,
    clock: Clock = system_clock,
) -> Task:
    """Create a pending task with base XP derived from its priority.

    Raises:
        InvalidArgumentError: If energy_required is outside 1-5
    """
    ensure_energy_level(energy_required, field="energy_required")

    return Task(
        id=new_id(),
        title=title,
        description=description,
        status=TaskStatus.PENDING,
        priority=priority,
        estimated_minutes=settings.default_task_minutes if estimated_minutes is None else estimated_minutes,
        due_date=due_date,
        scheduled_for=scheduled_for,
        created_at=clock.now(),
        energy_required=energy_required,
        contexts=contexts or [TaskContext.ANYWHERE],
        tags=tags or [],
        chain_id=chain_id,
        chain_order=chain_order,
        base_xp=calculate_base_xp(priority),
        is_recurring=recurrence_rule is not None,
        recurrence_rule=recurrence_rule,
    )


def start_task(task: Task, *, clock: Clock = system_clock) -> Task:
    """Move a pending or deferred task to in_progress."""
    if task.status not in _STARTABLE_STATES:
        msg = f"Cannot start: task {task.id} is {task.status}"
        raise InvalidStateError(msg)
    return task.model_copy(update={"status": TaskStatus.IN_PROGRESS, "started_at": clock.now()})


def complete_task(task: Task, *, clock: Clock = system_clock) -> Task:
    """Mark a task completed, stamping completed_at and actual_minutes.

    Tasks that were started measure actual time from started_at; tasks
    completed straight from pending are credited their estimate.

    Raises:
        InvalidStateError: If the task is not pending or in_progress
    """
    with span("task_service.complete_task"):
        if task.status not in _COMPLETABLE_STATES:
            msg = f"Cannot complete: task {task.id} is {task.status}"
            raise InvalidStateError(msg)

        now = clock.now()
        if task.status == TaskStatus.IN_PROGRESS and task.started_at is not None:
            elapsed = now - as_local(task.started_at, now)
            actual_minutes = max(0, round(elapsed.total_seconds() / 60))
        else:
            actual_minutes = task.estimated_minutes

        logger.info(f"Completed task {task.id} in {actual_minutes} min")

        return task.model_copy(
            update={
                "status": TaskStatus.COMPLETED,
                "completed_at": now,
                "actual_minutes": actual_minutes,
            }
        )


def skip_task(task: Task) -> Task:
    """Mark a task skipped; skipped tasks drop out of the day's plan."""
    if task.status == TaskStatus.COMPLETED:
        msg = f"Cannot skip: task {task.id} is already completed"
        raise InvalidStateError(msg)
    return task.model_copy(update={"status": TaskStatus.SKIPPED})


def defer_task(task: Task, new_date: datetime) -> Task:
    """Push a task to a later date."""
    if task.status == TaskStatus.COMPLETED:
        msg = f"Cannot defer: task {task.id} is already completed"
        raise InvalidStateError(msg)
    return task.model_copy(update={"status": TaskStatus.DEFERRED, "scheduled_for": new_date})


# ==========================================
# QUICK CAPTURE
# ==========================================


def _end_of_day(value: datetime) -> datetime:
    return value.replace(hour=23, minute=59, second=59, microsecond=999999)


def extract_due_date(text: str, now: datetime) -> datetime | None:
    """Parse "today", "tomorrow", "next week" or a weekday name into a due date."""
    lower = text.lower()

    if re.search(r"\btoday\b", lower):
        return _end_of_day(now)
    if re.search(r"\btomorrow\b", lower):
        return _end_of_day(now + timedelta(days=1))
    if re.search(r"\bnext week\b", lower):
        return _end_of_day(now + timedelta(days=7))

    for index, day in enumerate(_WEEKDAYS):
        if re.search(rf"\b{day}\b", lower):
            days_until = index - now.weekday()
            if days_until <= 0:
                days_until += 7
            return _end_of_day(now + timedelta(days=days_until))

    return None


def detect_priority(text: str) -> TaskPriority:
    """Infer priority from wording."""
    lower = text.lower()

    if any(word in lower for word in ("urgent", "asap", "critical")):
        return TaskPriority.CRITICAL
    if "important" in lower or "priority" in lower:
        return TaskPriority.HIGH
    if any(phrase in lower for phrase in ("when i have time", "eventually", "someday")):
        return TaskPriority.SOMEDAY
    return TaskPriority.MEDIUM


def _strip_dates(text: str) -> str:
    cleaned = re.sub(r"\b(today|tomorrow|next week)\b", "", text, flags=re.IGNORECASE)
    cleaned = re.sub(
        r"\b(by|on)\s+(monday|tuesday|wednesday|thursday|friday|saturday|sunday)\b",
        "",
        cleaned,
        flags=re.IGNORECASE,
    )
    return re.sub(r"\s+", " ", cleaned).strip()


def quick_capture(text: str, *, clock: Clock = system_clock) -> Task:
    """Create a task from a free-text thought with minimal friction."""
    now = clock.now()
    return create_task(
        _strip_dates(text) or text.strip(),
        priority=detect_priority(text),
        due_date=extract_due_date(text, now),
        estimated_minutes=15,
        clock=clock,
    )


# ==========================================
# MICRO-ACTIONS
# ==========================================


def _suggest_micro_steps(task: Task) -> list[str]:
    title = task.title.lower()

    if "email" in title or "message" in title:
        return ["Open your inbox", "Find the thread", "Type the first sentence", "Finish and send"]
    if "clean" in title or "organize" in title:
        return ["Go to the area", "Pick up five things", "Put them away", "Repeat for the rest"]
    if "write" in title or "document" in title:
        return ["Open the document", "Write one sentence", "Write the main point", "Quick read-through"]
    if "call" in title or "phone" in title:
        return ["Look up the contact", "Note the first thing to say", "Make the call"]
    return [f"Start: {task.title}", "First small step", "Keep going", "Wrap up"]


def break_into_micro_actions(task: Task) -> list[Task]:
    """Split a task into two-minute steps chained under the original."""
    if task.estimated_minutes <= 2:
        return [task]

    steps = _suggest_micro_steps(task)
    minutes_per_step = math.ceil(task.estimated_minutes / len(steps))
    xp_per_step = math.ceil(task.base_xp / len(steps))

    return [
        task.model_copy(
            update={
                "id": new_id(),
                "title": step,
                "estimated_minutes": min(minutes_per_step, 2),
                "chain_id": task.id,
                "chain_order": index,
                "parent_task_id": task.id,
                "base_xp": xp_per_step,
            }
        )
        for index, step in enumerate(steps)
    ]


# ==========================================
# BIG 3 AND STATS
# ==========================================


def _due_sort_key(task: Task) -> float:
    return task.due_date.timestamp() if task.due_date else math.inf


def get_big_three(tasks: Iterable[Task], *, clock: Clock = system_clock) -> list[Task]:
    """The three most important pending tasks for today.

    Candidates are tasks due by end of today, tasks scheduled for today, and
    unscheduled critical/high tasks. Ordered by priority, then due date.
    """
    now = clock.now()
    end_of_today = _end_of_day(now)
    today = now.date()

    def is_candidate(task: Task) -> bool:
        if task.status != TaskStatus.PENDING:
            return False
        if task.due_date and as_local(task.due_date, now) <= end_of_today:
            return True
        if task.scheduled_for:
            return local_date(task.scheduled_for, now) == today
        return task.priority in (TaskPriority.CRITICAL, TaskPriority.HIGH)

    candidates = [t for t in tasks if is_candidate(t)]
    candidates.sort(key=lambda t: (PRIORITY_ORDER[t.priority], _due_sort_key(t)))
    return candidates[:3]


def calculate_task_stats(tasks: Iterable[Task], *, clock: Clock = system_clock) -> TaskStats:
    """Aggregate counts, completion rate and overdue figures."""
    task_list = list(tasks)
    now = clock.now()
    today = now.date()

    pending = [t for t in task_list if t.status == TaskStatus.PENDING]
    completed = [t for t in task_list if t.status == TaskStatus.COMPLETED]
    skipped = [t for t in task_list if t.status == TaskStatus.SKIPPED]

    decided = len(completed) + len(skipped)
    durations = [t.actual_minutes for t in completed if t.actual_minutes is not None]

    return TaskStats(
        total_pending=len(pending),
        total_completed=len(completed),
        total_skipped=len(skipped),
        completion_rate=len(completed) / decided if decided else 0.0,
        average_completion_minutes=sum(durations) / len(durations) if durations else 0.0,
        overdue_count=sum(1 for t in pending if t.due_date and as_local(t.due_date, now) < now),
        streak_eligible=sum(
            1 for t in pending if t.scheduled_for is None or local_date(t.scheduled_for, now) == today
        ),
    )


# ==========================================
# RECURRENCE
# ==========================================


def spawn_next_occurrence(task: Task, *, clock: Clock = system_clock) -> Task | None:
    """Create the next pending instance of a recurring task, or None when the rule is exhausted."""
    if not task.is_recurring or task.recurrence_rule is None:
        return None

    now = clock.now()
    anchor = task.scheduled_for or task.completed_at or now
    next_time = next_occurrence(task.recurrence_rule, as_local(anchor, now), task.occurrence_index + 1)
    if next_time is None:
        logger.info(f"Recurring task {task.id} has no further occurrences")
        return None

    return task.model_copy(
        update={
            "id": new_id(),
            "status": TaskStatus.PENDING,
            "created_at": now,
            "scheduled_for": next_time,
            "due_date": next_time if task.due_date else None,
            "started_at": None,
            "completed_at": None,
            "actual_minutes": None,
            "parent_task_id": task.parent_task_id or task.id,
            "occurrence_index": task.occurrence_index + 1,
        }
    )
