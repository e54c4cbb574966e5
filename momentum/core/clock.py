"""Injectable wall-clock source.

Every service that needs "now" takes a keyword-only `clock` argument that
defaults to `system_clock`. Tests pass a `FixedClock` instead.
"""

from datetime import date, datetime, timedelta
from typing import Literal, Protocol
from zoneinfo import ZoneInfo

from momentum.core.config import settings


TimeOfDay = Literal["morning", "afternoon", "evening", "night"]


class Clock(Protocol):
    """Source of the current time."""

    def now(self) -> datetime:
        """Return the current timezone-aware datetime."""
        ...


class SystemClock:
    """Host wall clock in the configured timezone."""

    def __init__(self, tz: str | None = None) -> None:
        self._tz = ZoneInfo(tz or settings.timezone)

    def now(self) -> datetime:
        return datetime.now(self._tz)


class FixedClock:
    """Clock pinned to a single instant, advanced explicitly."""

    def __init__(self, at: datetime) -> None:
        if at.tzinfo is None:
            at = at.replace(tzinfo=ZoneInfo(settings.timezone))
        self._now = at

    def now(self) -> datetime:
        return self._now

    def advance(self, **delta: float) -> datetime:
        """Move the clock forward by a timedelta's keyword arguments."""
        self._now = self._now + timedelta(**delta)
        return self._now

    def set(self, at: datetime) -> None:
        if at.tzinfo is None:
            at = at.replace(tzinfo=self._now.tzinfo)
        self._now = at


system_clock: Clock = SystemClock()


def time_of_day_for(hour: int) -> TimeOfDay:
    """Bucket a wall-clock hour into a time of day."""
    if 5 <= hour < 12:
        return "morning"
    if 12 <= hour < 17:
        return "afternoon"
    if 17 <= hour < 21:
        return "evening"
    return "night"


def as_local(value: datetime, reference: datetime) -> datetime:
    """Express value in reference's timezone; naive values are assumed to already be local."""
    if value.tzinfo is None:
        return value.replace(tzinfo=reference.tzinfo)
    return value.astimezone(reference.tzinfo)


def local_date(value: datetime, reference: datetime) -> date:
    """Calendar date of value as seen from reference's timezone."""
    return as_local(value, reference).date()


def days_between(later: date, earlier: date) -> int:
    """Whole calendar days from earlier to later."""
    return (later - earlier).days


def hours_until(target: datetime, now: datetime) -> float:
    """Hours from now until target (negative when target is in the past)."""
    return (as_local(target, now) - now).total_seconds() / 3600
