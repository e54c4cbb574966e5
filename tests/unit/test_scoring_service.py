"""Unit tests for scoring_service module."""

from datetime import timedelta

import pytest

from momentum.core.errors import InvalidArgumentError, InvalidStateError
from momentum.domain.context import Location, Mood
from momentum.domain.task import TaskContext, TaskPriority, TaskStatus
from momentum.services import scoring_service
from tests.unit.mocks import DEFAULT_NOW, ScriptedRandom


@pytest.mark.unit
def test_high_priority_task_due_soon_scores_at_least_100(task_factory, context_factory, fixed_clock):
    """Test a high-priority task due today in a matching context scores at least 100."""
    task = task_factory(
        priority=TaskPriority.HIGH,
        energy_required=3,
        estimated_minutes=20,
        due_date=DEFAULT_NOW + timedelta(hours=18),
    )
    context = context_factory(energy_level=3, available_minutes=30)

    result = scoring_service.score_task(task, context, clock=fixed_clock)

    # priority 30 + energy 25 + time fit 20 + due today 25 + morning priority 10
    assert result.score == 110
    assert result.score >= 100
    assert "Perfect energy match" in result.reasons
    assert "Due today" in result.reasons
    assert "Fits in 30 min" in result.reasons


@pytest.mark.unit
def test_score_is_never_negative(task_factory, context_factory, fixed_clock):
    """Test no combination of task and context scores below zero."""
    for energy in range(1, 6):
        for context_energy in range(1, 6):
            for priority in TaskPriority:
                task = task_factory(priority=priority, energy_required=energy, estimated_minutes=90)
                context = context_factory(energy_level=context_energy, available_minutes=5, time_of_day="night")
                assert scoring_service.score_task(task, context, clock=fixed_clock).score >= 0


@pytest.mark.unit
def test_energy_mismatch_reduces_but_never_below_zero(task_factory, context_factory, fixed_clock):
    """Test a large energy mismatch floors the energy factor at zero."""
    task = task_factory(priority=TaskPriority.SOMEDAY, energy_required=5, estimated_minutes=30)
    context = context_factory(energy_level=1, time_of_day="afternoon")

    result = scoring_service.score_task(task, context, clock=fixed_clock)

    # someday 5 + energy max(0, 25 - 4*5) = 5
    assert result.score == 10


@pytest.mark.unit
def test_overdue_task_gets_largest_urgency_bonus(task_factory, context_factory, fixed_clock):
    """Test overdue tasks get the largest urgency bonus."""
    task = task_factory(priority=TaskPriority.LOW, energy_required=1, due_date=DEFAULT_NOW - timedelta(hours=1))
    context = context_factory(time_of_day="afternoon")

    result = scoring_service.score_task(task, context, clock=fixed_clock)

    assert result.score == 10 + 30
    assert "Overdue" in result.reasons


@pytest.mark.unit
@pytest.mark.parametrize(
    ("hours_left", "expected"),
    [
        (-0.5, (30, "Overdue")),
        (10, (25, "Due today")),
        (50, (15, "Due soon")),
        (100, (5, "Due this week")),
        (200, (0, None)),
    ],
)
def test_urgency_bonus_windows(hours_left, expected):
    """Test each urgency window."""
    assert scoring_service.urgency_bonus(hours_left) == expected


@pytest.mark.unit
def test_quick_win_bonus_for_short_tasks(task_factory, context_factory, fixed_clock):
    """Test tasks of five minutes or less get the quick-win bonus."""
    task = task_factory(priority=TaskPriority.LOW, energy_required=3, estimated_minutes=5)
    context = context_factory(time_of_day="evening")

    result = scoring_service.score_task(task, context, clock=fixed_clock)

    # low 10 + light evening 10 + quick win 10
    assert result.score == 30
    assert "Quick win" in result.reasons


@pytest.mark.unit
def test_location_match(task_factory, context_factory, fixed_clock):
    """Test a task doable at the current location scores higher."""
    phone_task = task_factory(contexts=[TaskContext.PHONE], energy_required=3)
    home_task = task_factory(contexts=[TaskContext.HOME], energy_required=3)
    context = context_factory(location=Location.TRANSIT, time_of_day="night")

    phone = scoring_service.score_task(phone_task, context, clock=fixed_clock)
    home = scoring_service.score_task(home_task, context, clock=fixed_clock)

    assert phone.score - home.score == 15
    assert "Location appropriate" in phone.reasons


@pytest.mark.unit
def test_tired_mood_only_matches_lowest_energy_short_tasks(task_factory):
    """Test tired mood matches only the lightest short tasks."""
    assert scoring_service.matches_mood(task_factory(energy_required=1, estimated_minutes=10), Mood.TIRED)
    assert not scoring_service.matches_mood(task_factory(energy_required=2, estimated_minutes=5), Mood.TIRED)
    assert not scoring_service.matches_mood(task_factory(energy_required=1, estimated_minutes=11), Mood.TIRED)


@pytest.mark.unit
def test_creative_and_anxious_moods(task_factory):
    """Test creative and anxious mood predicates."""
    creative = task_factory(tags=["writing"], estimated_minutes=10)
    assert scoring_service.matches_mood(creative, Mood.CREATIVE)
    assert not scoring_service.matches_mood(task_factory(tags=["creative"], estimated_minutes=10), Mood.ANXIOUS)
    assert scoring_service.matches_mood(task_factory(estimated_minutes=15), Mood.ANXIOUS)


@pytest.mark.unit
def test_scoring_non_pending_task_raises(task_factory, context_factory, fixed_clock):
    """Test scoring a task that is not pending is rejected."""
    task = task_factory(status=TaskStatus.COMPLETED)

    with pytest.raises(InvalidStateError):
        scoring_service.score_task(task, context_factory(), clock=fixed_clock)


@pytest.mark.unit
def test_out_of_range_context_energy_raises(task_factory, context_factory, fixed_clock):
    """Test a context energy outside 1-5 is rejected."""
    context = context_factory().model_copy(update={"energy_level": 7})

    with pytest.raises(InvalidArgumentError):
        scoring_service.score_task(task_factory(), context, clock=fixed_clock)


@pytest.mark.unit
def test_suggestions_ranked_best_first_and_limited(task_factory, context_factory, fixed_clock):
    """Test suggestions are pending tasks, best first, truncated."""
    low = task_factory(title="low", priority=TaskPriority.LOW)
    critical = task_factory(title="critical", priority=TaskPriority.CRITICAL)
    medium = task_factory(title="medium", priority=TaskPriority.MEDIUM)
    done = task_factory(title="done", priority=TaskPriority.CRITICAL, status=TaskStatus.COMPLETED)

    results = scoring_service.get_smart_suggestions(
        [low, critical, medium, done], context_factory(), limit=2, clock=fixed_clock
    )

    assert [r.task_id for r in results] == [critical.id, medium.id]


@pytest.mark.unit
def test_suggestion_ties_keep_input_order(task_factory, context_factory, fixed_clock):
    """Test equal scores keep their input order."""
    first = task_factory(title="first")
    second = task_factory(title="second")

    results = scoring_service.get_smart_suggestions([first, second], context_factory(), clock=fixed_clock)

    assert [r.task_id for r in results] == [first.id, second.id]


@pytest.mark.unit
def test_scattered_mood_shuffles_candidates_with_injected_random(task_factory, context_factory, fixed_clock):
    """Test scattered mood shuffles candidates with the injected random source."""
    first = task_factory(title="first")
    second = task_factory(title="second")
    rng = ScriptedRandom([0.0])

    results = scoring_service.get_smart_suggestions(
        [first, second], context_factory(mood=Mood.SCATTERED), clock=fixed_clock, rng=rng
    )

    assert [r.task_id for r in results] == [second.id, first.id]
    assert rng.calls == 1


@pytest.mark.unit
def test_negative_limit_raises(context_factory, fixed_clock):
    """Test a negative limit is rejected."""
    with pytest.raises(InvalidArgumentError):
        scoring_service.get_smart_suggestions([], context_factory(), limit=-1, clock=fixed_clock)
