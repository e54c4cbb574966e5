"""Unit tests for day_service module."""

from datetime import timedelta

import pytest

from momentum.core.errors import InvalidArgumentError
from momentum.domain.day import DayType
from momentum.domain.progress import UserStats
from momentum.domain.task import TaskPriority, TaskStatus
from momentum.services import day_service
from tests.unit.mocks import DEFAULT_NOW


def make_day(task_factory, completed: int, pending: int = 0, skipped: int = 0):
    return (
        [task_factory(status=TaskStatus.COMPLETED) for _ in range(completed)]
        + [task_factory() for _ in range(pending)]
        + [task_factory(status=TaskStatus.SKIPPED) for _ in range(skipped)]
    )


@pytest.mark.unit
def test_nothing_planned_is_zero_day() -> None:
    """Test a day with nothing planned rates zero."""
    evaluation = day_service.evaluate_day([])

    assert evaluation.type == DayType.ZERO
    assert evaluation.completion_rate == 0.0
    assert evaluation.tasks_planned == 0
    assert not evaluation.mvd_achieved


@pytest.mark.unit
@pytest.mark.parametrize(
    ("completed", "planned", "mvd", "expected"),
    [
        (3, 3, False, DayType.PERFECT),
        (9, 10, False, DayType.PERFECT),
        (2, 2, False, DayType.GOOD),
        (7, 10, False, DayType.GOOD),
        (4, 10, False, DayType.OKAY),
        (2, 10, False, DayType.OKAY),
        (1, 10, False, DayType.MINIMUM_VIABLE),
        (0, 5, True, DayType.MINIMUM_VIABLE),
        (0, 5, False, DayType.ZERO),
        (0, 0, True, DayType.MINIMUM_VIABLE),
    ],
)
def test_classify_day(completed, planned, mvd, expected) -> None:
    """Test each day type threshold."""
    assert day_service.classify_day(completed, planned, mvd) == expected


@pytest.mark.unit
def test_classification_is_exhaustive() -> None:
    """Test every combination of figures lands on exactly one day type."""
    for planned in range(8):
        for completed in range(planned + 1):
            for mvd in (False, True):
                assert day_service.classify_day(completed, planned, mvd) in set(DayType)


@pytest.mark.unit
def test_skipped_tasks_are_not_planned(task_factory) -> None:
    """Test skipped tasks do not count as planned."""
    evaluation = day_service.evaluate_day(make_day(task_factory, completed=3, skipped=4))

    assert evaluation.tasks_planned == 3
    assert evaluation.type == DayType.PERFECT


@pytest.mark.unit
def test_xp_earned_sums_completed_base_xp(task_factory) -> None:
    """Test day XP sums the base XP of completed tasks."""
    tasks = [
        task_factory(status=TaskStatus.COMPLETED, priority=TaskPriority.CRITICAL),
        task_factory(status=TaskStatus.COMPLETED, priority=TaskPriority.LOW),
        task_factory(priority=TaskPriority.HIGH),
    ]

    assert day_service.evaluate_day(tasks).xp_earned == 60


@pytest.mark.unit
def test_mvd_satisfied_by_completed_subtask(task_factory) -> None:
    """Test completing a subtask of a minimum viable day task satisfies it."""
    parent = task_factory()
    step = task_factory(status=TaskStatus.COMPLETED, parent_task_id=parent.id)
    mvd = day_service.create_minimum_viable_day([parent.id])

    evaluation = day_service.evaluate_day([parent, step], mvd)

    assert evaluation.mvd_achieved


@pytest.mark.unit
def test_mvd_not_satisfied_by_unrelated_task(task_factory) -> None:
    """Test an unrelated completion does not satisfy the minimum viable day."""
    listed = task_factory()
    other = task_factory(status=TaskStatus.COMPLETED)
    mvd = day_service.create_minimum_viable_day([listed.id])

    evaluation = day_service.evaluate_day([listed, other], mvd)

    assert not evaluation.mvd_achieved
    assert evaluation.type == DayType.OKAY


@pytest.mark.unit
def test_tasks_for_day_prefers_schedule_over_creation(task_factory, fixed_clock) -> None:
    """Test a scheduled date wins over the creation date."""
    today = DEFAULT_NOW.date()
    created_today = task_factory()
    scheduled_tomorrow = task_factory(scheduled_for=DEFAULT_NOW + timedelta(days=1))
    created_yesterday = task_factory(created_at=DEFAULT_NOW - timedelta(days=1))
    scheduled_today = task_factory(created_at=DEFAULT_NOW - timedelta(days=3), scheduled_for=DEFAULT_NOW)

    result = day_service.tasks_for_day(
        [created_today, scheduled_tomorrow, created_yesterday, scheduled_today], today, clock=fixed_clock
    )

    assert result == [created_today, scheduled_today]


@pytest.mark.unit
def test_create_day_rating(task_factory, fixed_clock) -> None:
    """Test a rating copies the evaluation figures and notes."""
    evaluation = day_service.evaluate_day(make_day(task_factory, completed=1, pending=1))

    rating = day_service.create_day_rating(evaluation, 2, "rough morning", clock=fixed_clock)

    assert rating.type == evaluation.type
    assert rating.energy_level == 2
    assert rating.tasks_completed == 1
    assert rating.date == DEFAULT_NOW


@pytest.mark.unit
def test_create_day_rating_rejects_bad_energy(fixed_clock) -> None:
    """Test a rating needs an energy level between 1 and 5."""
    evaluation = day_service.evaluate_day([])

    with pytest.raises(InvalidArgumentError):
        day_service.create_day_rating(evaluation, 6, clock=fixed_clock)


@pytest.mark.unit
def test_apply_day_rating_updates_counters_and_average(task_factory, fixed_clock) -> None:
    """Test ratings bump the day-type counters and the running energy average."""
    stats = UserStats(average_energy_level=3.0, zero_days=1)
    evaluation = day_service.evaluate_day([])
    rating = day_service.create_day_rating(evaluation, 1, clock=fixed_clock)

    updated = day_service.apply_day_rating_to_stats(stats, rating, rated_days_before=2)

    assert updated.zero_days == 2
    assert updated.average_energy_level == pytest.approx(7 / 3)


@pytest.mark.unit
def test_suggest_mvd_tasks_prefers_recurring_habits(task_factory) -> None:
    """Test minimum viable day suggestions favour short recurring habits."""
    one_off = task_factory(title="one-off", estimated_minutes=5, energy_required=1, priority=TaskPriority.HIGH)
    habit = task_factory(title="habit", estimated_minutes=5, energy_required=2, is_recurring=True)
    too_long = task_factory(title="long", estimated_minutes=30, energy_required=1)
    too_hard = task_factory(title="hard", estimated_minutes=5, energy_required=4)

    result = day_service.suggest_mvd_tasks([one_off, habit, too_long, too_hard])

    assert [t.title for t in result] == ["habit", "one-off"]


@pytest.mark.unit
def test_tasks_for_day_includes_tasks_completed_that_day(task_factory, fixed_clock) -> None:
    """Work finished today counts for today even when it was planned earlier."""
    finished_today = task_factory(
        created_at=DEFAULT_NOW - timedelta(days=2), status=TaskStatus.COMPLETED, completed_at=DEFAULT_NOW
    )
    finished_yesterday = task_factory(
        created_at=DEFAULT_NOW - timedelta(days=2),
        status=TaskStatus.COMPLETED,
        completed_at=DEFAULT_NOW - timedelta(days=1),
    )

    result = day_service.tasks_for_day([finished_today, finished_yesterday], DEFAULT_NOW.date(), clock=fixed_clock)

    assert result == [finished_today]
