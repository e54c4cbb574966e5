"""Deterministic stand-ins for injectable dependencies."""

from collections.abc import Iterable
from datetime import UTC, datetime


# Wednesday, mid-morning: outside the early-bird and night-owl windows
DEFAULT_NOW = datetime(2024, 6, 12, 10, 0, tzinfo=UTC)


class ScriptedRandom:
    """Random source that replays a fixed script of draws.

    Running out of draws fails the test, so a test also pins how many
    draws the code under test makes.
    """

    def __init__(self, values: Iterable[float]):
        self._values = list(values)
        self.calls = 0

    def random(self) -> float:
        if self.calls >= len(self._values):
            raise AssertionError(f"ScriptedRandom exhausted after {self.calls} draws")
        value = self._values[self.calls]
        self.calls += 1
        return value


class ConstantRandom:
    """Random source that always returns the same draw."""

    def __init__(self, value: float):
        self.value = value

    def random(self) -> float:
        return self.value
