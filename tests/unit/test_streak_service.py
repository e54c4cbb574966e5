"""Unit tests for streak_service module."""

from datetime import timedelta

import pytest

from momentum.core.errors import ErrorCategory, InvalidArgumentError, InvalidStateError
from momentum.domain.progress import StreakType, UserStats
from momentum.services import streak_service
from momentum.services.streak_service import StreakState
from tests.unit.mocks import DEFAULT_NOW


def days_ago(days: int):
    return DEFAULT_NOW - timedelta(days=days)


@pytest.mark.unit
def test_create_streak_uses_configured_shields(fixed_clock) -> None:
    """Test a new streak gets the configured starting shields."""
    streak = streak_service.create_streak(clock=fixed_clock)

    assert streak.type == StreakType.DAILY
    assert streak.current_count == 0
    assert streak.shields_available == 1
    assert streak.started_at == DEFAULT_NOW


@pytest.mark.unit
def test_consecutive_qualifying_day_extends(streak_factory, fixed_clock) -> None:
    """Test a qualifying day after yesterday extends the streak."""
    streak = streak_factory(current_count=4, longest_count=4, last_activity_date=days_ago(1))

    result = streak_service.advance_streak(streak, 2, clock=fixed_clock)

    assert result.current_count == 5
    assert result.longest_count == 5
    assert result.last_activity_date == DEFAULT_NOW


@pytest.mark.unit
def test_same_day_only_refreshes_date(streak_factory, fixed_clock) -> None:
    """Test more activity on the same day only refreshes the date."""
    earlier = DEFAULT_NOW.replace(hour=1)
    streak = streak_factory(current_count=4, last_activity_date=earlier)

    result = streak_service.advance_streak(streak, 1, clock=fixed_clock)

    assert result.current_count == 4
    assert result.last_activity_date == DEFAULT_NOW


@pytest.mark.unit
def test_same_day_without_qualifying_is_unchanged(streak_factory, fixed_clock) -> None:
    """Test a non-qualifying same-day update changes nothing."""
    streak = streak_factory(current_count=4, last_activity_date=DEFAULT_NOW.replace(hour=1))

    assert streak_service.advance_streak(streak, 0, clock=fixed_clock) == streak


@pytest.mark.unit
def test_next_day_without_qualifying_is_at_risk_not_broken(streak_factory, fixed_clock) -> None:
    """Test a quiet next day leaves the streak active."""
    streak = streak_factory(current_count=4, last_activity_date=days_ago(1))

    result = streak_service.advance_streak(streak, 0, clock=fixed_clock)

    assert result == streak
    assert streak_service.streak_state(result, clock=fixed_clock) == StreakState.ACTIVE


@pytest.mark.unit
def test_one_shield_covers_one_missed_day(streak_factory, fixed_clock) -> None:
    """Test one shield covers one missed day."""
    streak = streak_factory(current_count=5, longest_count=5, shields_available=1, last_activity_date=days_ago(2))

    result = streak_service.advance_streak(streak, 1, clock=fixed_clock)

    assert result.current_count == 6
    assert result.shields_available == 0
    assert result.shields_used == streak.shields_used + 1
    assert result.longest_count == 6


@pytest.mark.unit
def test_shield_consumption_conserves_total(streak_factory, fixed_clock) -> None:
    """Test shields move from available to used without changing the total."""
    streak = streak_factory(current_count=2, shields_available=4, shields_used=1, last_activity_date=days_ago(3))

    result = streak_service.advance_streak(streak, 1, clock=fixed_clock)

    assert result.shields_available == 2
    assert result.shields_available + result.shields_used == streak.shields_available + streak.shields_used


@pytest.mark.unit
def test_gap_without_shields_restarts_at_one(streak_factory, fixed_clock) -> None:
    """Test an uncovered gap restarts a qualifying streak at one."""
    streak = streak_factory(
        current_count=5, longest_count=5, shields_available=0, last_activity_date=days_ago(3), started_at=days_ago(10)
    )

    result = streak_service.advance_streak(streak, 1, clock=fixed_clock)

    assert result.current_count == 1
    assert result.longest_count == 5
    assert result.started_at == DEFAULT_NOW


@pytest.mark.unit
def test_gap_without_qualifying_restarts_at_zero(streak_factory, fixed_clock) -> None:
    """Test an uncovered gap without qualifying activity resets to zero."""
    streak = streak_factory(current_count=5, shields_available=0, last_activity_date=days_ago(4))

    result = streak_service.advance_streak(streak, 0, clock=fixed_clock)

    assert result.current_count == 0


@pytest.mark.unit
def test_future_activity_date_raises(streak_factory, fixed_clock) -> None:
    """Test a last activity in the future is rejected."""
    streak = streak_factory(last_activity_date=DEFAULT_NOW + timedelta(days=1))

    with pytest.raises(InvalidStateError) as exc_info:
        streak_service.advance_streak(streak, 1, clock=fixed_clock)

    assert exc_info.value.category == ErrorCategory.FUTURE_ACTIVITY_DATE


@pytest.mark.unit
def test_negative_task_count_raises(streak_factory, fixed_clock) -> None:
    """Test a negative task count is rejected."""
    with pytest.raises(InvalidArgumentError):
        streak_service.advance_streak(streak_factory(), -1, clock=fixed_clock)


@pytest.mark.unit
def test_minimum_required_is_respected(streak_factory, fixed_clock) -> None:
    """Test the day qualifies only at the required task count."""
    streak = streak_factory(current_count=3, last_activity_date=days_ago(1))

    assert streak_service.advance_streak(streak, 2, minimum_required=3, clock=fixed_clock) == streak
    assert streak_service.advance_streak(streak, 3, minimum_required=3, clock=fixed_clock).current_count == 4


@pytest.mark.unit
def test_count_never_decreases_over_qualifying_days(streak_factory, fixed_clock) -> None:
    """Test the count never drops across consecutive qualifying days."""
    streak = streak_factory(last_activity_date=days_ago(1))
    counts = []

    for _ in range(10):
        streak = streak_service.advance_streak(streak, 1, clock=fixed_clock)
        counts.append(streak.current_count)
        fixed_clock.advance(days=1)

    assert counts == sorted(counts)
    assert counts[-1] == 10


@pytest.mark.unit
@pytest.mark.parametrize(("count", "visible"), [(0, 0), (3, 3), (7, 7), (8, 7), (100, 7)])
def test_visible_streak_is_capped(streak_factory, count, visible) -> None:
    """Test the visible streak is capped at seven."""
    assert streak_service.get_visible_streak(streak_factory(current_count=count)) == visible


@pytest.mark.unit
def test_add_shield_is_additive(streak_factory) -> None:
    """Test adding shields is additive and rejects negatives."""
    streak = streak_factory(shields_available=1)

    assert streak_service.add_streak_shield(streak, 2).shields_available == 3

    with pytest.raises(InvalidArgumentError):
        streak_service.add_streak_shield(streak, -1)


@pytest.mark.unit
@pytest.mark.parametrize(
    ("count", "days", "shields", "state"),
    [
        (0, 0, 0, StreakState.ZERO),
        (3, 0, 0, StreakState.ACTIVE),
        (3, 1, 0, StreakState.ACTIVE),
        (3, 3, 2, StreakState.RECOVERABLE),
        (3, 3, 1, StreakState.BROKEN),
    ],
)
def test_streak_state(streak_factory, fixed_clock, count, days, shields, state) -> None:
    """Test each implicit streak state."""
    streak = streak_factory(current_count=count, last_activity_date=days_ago(days), shields_available=shields)

    assert streak_service.streak_state(streak, clock=fixed_clock) == state


@pytest.mark.unit
def test_apply_streak_to_stats_keeps_longest(streak_factory) -> None:
    """Test copying a streak into stats never lowers the longest streak."""
    stats = UserStats(current_streak=9, longest_streak=12)
    streak = streak_factory(current_count=1, longest_count=4)

    updated = streak_service.apply_streak_to_stats(stats, streak)

    assert updated.current_streak == 1
    assert updated.longest_streak == 12
