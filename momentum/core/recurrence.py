"""Recurrence schedules for repeating tasks.

Rules are translated to a CRON expression, to an "INTERVAL:<days>:<cron>"
expression for every-N-days schedules, or to a "MONTHS:<n>:<cron>" expression
for every-N-months schedules. Both prefixed forms count from the previous
occurrence rather than from the start of the year.
"""

import calendar
from datetime import datetime, timedelta

from croniter import croniter

from momentum.domain.task import RecurrenceFrequency, RecurrenceRule


INTERVAL_PREFIX = "INTERVAL:"
MONTHS_PREFIX = "MONTHS:"


def _cron_weekday(weekday: int) -> int:
    """Convert Python weekday (0=Monday) to CRON weekday (0=Sunday)."""
    return (weekday + 1) % 7


def rule_to_cron(rule: RecurrenceRule) -> str:
    """Translate a recurrence rule to a CRON, INTERVAL or MONTHS expression."""
    daily_cron = f"0 {rule.hour} * * *"

    if rule.frequency == RecurrenceFrequency.DAILY:
        if rule.interval == 1:
            return daily_cron
        return f"{INTERVAL_PREFIX}{rule.interval}:{daily_cron}"

    if rule.frequency == RecurrenceFrequency.WEEKLY:
        if rule.interval == 1 and rule.days_of_week:
            days = ",".join(str(_cron_weekday(d)) for d in sorted(set(rule.days_of_week)))
            return f"0 {rule.hour} * * {days}"
        return f"{INTERVAL_PREFIX}{7 * rule.interval}:{daily_cron}"

    if rule.frequency == RecurrenceFrequency.MONTHLY:
        day = rule.day_of_month or 1
        monthly_cron = f"0 {rule.hour} {day} * *"
        if rule.interval == 1:
            return monthly_cron
        return f"{MONTHS_PREFIX}{rule.interval}:{monthly_cron}"

    return f"{INTERVAL_PREFIX}{rule.interval}:{daily_cron}"


def _months_between(later: datetime, earlier: datetime) -> int:
    return (later.year - earlier.year) * 12 + later.month - earlier.month


def _next_after_months(cron: str, from_time: datetime, months: int) -> datetime:
    """First CRON instant falling at least `months` calendar months after from_time."""
    schedule = croniter(cron, from_time)
    candidate = schedule.get_next(datetime)
    while _months_between(candidate, from_time) < months:
        candidate = schedule.get_next(datetime)
    return candidate


def next_occurrence(
    rule: RecurrenceRule,
    from_time: datetime,
    occurrences_so_far: int = 0,
) -> datetime | None:
    """Next scheduled instant after from_time, or None once the rule is exhausted."""
    if rule.max_occurrences is not None and occurrences_so_far >= rule.max_occurrences:
        return None

    expression = rule_to_cron(rule)
    if expression.startswith(INTERVAL_PREFIX):
        days = int(expression.split(":", 2)[1])
        next_time = (from_time + timedelta(days=days)).replace(hour=rule.hour, minute=0, second=0, microsecond=0)
    elif expression.startswith(MONTHS_PREFIX):
        _, months, cron = expression.split(":", 2)
        next_time = _next_after_months(cron, from_time, int(months))
    else:
        next_time = croniter(expression, from_time).get_next(datetime)

    if rule.end_date is not None and next_time > rule.end_date:
        return None
    return next_time


def describe_rule(rule: RecurrenceRule) -> str:
    """Human-readable description (e.g., "every Monday, Wednesday")."""
    if rule.frequency == RecurrenceFrequency.DAILY:
        return "daily" if rule.interval == 1 else f"every {rule.interval} days"

    if rule.frequency == RecurrenceFrequency.WEEKLY:
        if rule.interval == 1 and rule.days_of_week:
            names = [calendar.day_name[d] for d in sorted(set(rule.days_of_week))]
            return f"every {', '.join(names)}"
        return "weekly" if rule.interval == 1 else f"every {rule.interval} weeks"

    if rule.frequency == RecurrenceFrequency.MONTHLY:
        day = rule.day_of_month or 1
        suffix = "th"
        if day in (1, 21, 31):
            suffix = "st"
        elif day in (2, 22):
            suffix = "nd"
        elif day in (3, 23):
            suffix = "rd"
        every = "monthly" if rule.interval == 1 else f"every {rule.interval} months"
        return f"{every} on the {day}{suffix}"

    return f"every {rule.interval} days"
