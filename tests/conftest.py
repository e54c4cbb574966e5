"""Pytest configuration and shared fixtures."""

from collections.abc import Callable
from typing import Any

import logfire
import pytest

from momentum.core.clock import FixedClock
from momentum.domain.context import UserContext
from momentum.domain.progress import Streak, StreakType, UserStats
from momentum.domain.task import Task, TaskPriority
from momentum.services.task_service import calculate_base_xp, new_id
from tests.unit.mocks import DEFAULT_NOW


@pytest.fixture(scope="session", autouse=True)
def configure_logfire_for_tests() -> None:
    """Keep spans local; nothing is exported during tests."""
    logfire.configure(send_to_logfire=False, console=False)


@pytest.fixture
def fixed_clock() -> FixedClock:
    """Clock pinned to DEFAULT_NOW."""
    return FixedClock(DEFAULT_NOW)


@pytest.fixture
def task_factory() -> Callable[..., Task]:
    """Build tasks with sensible defaults; base XP follows priority unless given."""

    def _make(**overrides: Any) -> Task:
        priority = overrides.get("priority", TaskPriority.MEDIUM)
        fields: dict[str, Any] = {
            "id": new_id(),
            "title": "Task",
            "priority": priority,
            "estimated_minutes": 25,
            "created_at": DEFAULT_NOW,
            "base_xp": calculate_base_xp(priority),
            "energy_required": 3,
        }
        fields.update(overrides)
        return Task(**fields)

    return _make


@pytest.fixture
def context_factory() -> Callable[..., UserContext]:
    """Build a morning context with no optional fields set."""

    def _make(**overrides: Any) -> UserContext:
        fields: dict[str, Any] = {"timestamp": DEFAULT_NOW, "time_of_day": "morning", "day_of_week": 2}
        fields.update(overrides)
        return UserContext(**fields)

    return _make


@pytest.fixture
def streak_factory() -> Callable[..., Streak]:
    """Build a daily streak last active at DEFAULT_NOW."""

    def _make(**overrides: Any) -> Streak:
        fields: dict[str, Any] = {
            "id": new_id(),
            "type": StreakType.DAILY,
            "last_activity_date": DEFAULT_NOW,
            "started_at": DEFAULT_NOW,
        }
        fields.update(overrides)
        return Streak(**fields)

    return _make


@pytest.fixture
def stats() -> UserStats:
    """Fresh level-1 stats."""
    return UserStats()
