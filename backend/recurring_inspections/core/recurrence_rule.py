"""Recurrence Rule — immutable specification of how often an inspection repeats.

Invariants:
    - interval >= 1
    - end_date, if present, is not before start_date's calendar day
    - day_of_month in [1, 31] and day_of_week in [0, 6] when provided
    - Unset anchors are None — day_of_week=0 (Sunday) is a real value, never "unset"
    - Anchors outside their frequency (day_of_month under WEEKLY, etc.) are kept but ignored

Design Decisions:
    - Frozen dataclass over dict: a rule can't drift after validation (ADR: construction-time checks)
    - end_date normalized to a calendar date: the boundary is a day, not an instant
    - create_rule raises instead of returning an error value: matches the rest of core/
"""

from dataclasses import dataclass
from datetime import date, datetime

from recurring_inspections.core.domain_types import (
    Frequency, DayOfMonth, DayOfWeek,
    MIN_DAY_OF_MONTH, MAX_DAY_OF_MONTH, MIN_DAY_OF_WEEK, MAX_DAY_OF_WEEK,
)
from recurring_inspections.core.errors import (
    InvalidFrequencyError, RuleValidationError,
)


@dataclass(frozen=True)
class RecurrenceRule:
    """Validated recurrence specification — build with create_rule()."""
    frequency: Frequency
    interval: int
    start_date: date
    end_date: date | None = None
    day_of_month: DayOfMonth | None = None
    day_of_week: DayOfWeek | None = None


def calendar_day(value: date) -> date:
    """Strip the time-of-day from a datetime; plain dates pass through."""
    if isinstance(value, datetime):
        return value.date()
    return value


def parse_frequency(value: Frequency | str) -> Frequency:
    """Map a frequency tag to the closed enum. Case-insensitive for strings."""
    if isinstance(value, Frequency):
        return value
    if isinstance(value, str):
        try:
            return Frequency(value.strip().upper())
        except ValueError:
            pass
    raise InvalidFrequencyError(value)


def validate_interval(interval: object) -> int:
    # bool is an int subclass; True must not pass as interval=1
    if isinstance(interval, bool) or not isinstance(interval, int):
        raise RuleValidationError(
            f"interval must be an integer, got {interval!r}", "interval",
        )
    if interval < 1:
        raise RuleValidationError(
            f"interval must be >= 1, got {interval}", "interval",
        )
    return interval


def validate_day_of_month(day_of_month: object) -> DayOfMonth | None:
    if day_of_month is None:
        return None
    if isinstance(day_of_month, bool) or not isinstance(day_of_month, int):
        raise RuleValidationError(
            f"day_of_month must be an integer, got {day_of_month!r}",
            "day_of_month",
        )
    if not MIN_DAY_OF_MONTH <= day_of_month <= MAX_DAY_OF_MONTH:
        raise RuleValidationError(
            f"day_of_month must be between {MIN_DAY_OF_MONTH} and "
            f"{MAX_DAY_OF_MONTH}, got {day_of_month}",
            "day_of_month",
        )
    return DayOfMonth(day_of_month)


def validate_day_of_week(day_of_week: object) -> DayOfWeek | None:
    if day_of_week is None:
        return None
    if isinstance(day_of_week, bool) or not isinstance(day_of_week, int):
        raise RuleValidationError(
            f"day_of_week must be an integer, got {day_of_week!r}",
            "day_of_week",
        )
    if not MIN_DAY_OF_WEEK <= day_of_week <= MAX_DAY_OF_WEEK:
        raise RuleValidationError(
            f"day_of_week must be between {MIN_DAY_OF_WEEK} (Sunday) and "
            f"{MAX_DAY_OF_WEEK} (Saturday), got {day_of_week}",
            "day_of_week",
        )
    return DayOfWeek(day_of_week)


def create_rule(
    frequency: Frequency | str,
    interval: int,
    start_date: date,
    end_date: date | None = None,
    day_of_month: int | None = None,
    day_of_week: int | None = None,
) -> RecurrenceRule:
    """Validate raw recurrence fields and build a RecurrenceRule.

    Raises InvalidFrequencyError for an unknown frequency tag and
    RuleValidationError (with .field set) for every other violation.
    """
    parsed_frequency = parse_frequency(frequency)
    parsed_interval = validate_interval(interval)

    if not isinstance(start_date, date):
        raise RuleValidationError(
            f"start_date must be a date, got {start_date!r}", "start_date",
        )
    if end_date is not None:
        if not isinstance(end_date, date):
            raise RuleValidationError(
                f"end_date must be a date, got {end_date!r}", "end_date",
            )
        end_date = calendar_day(end_date)
        if end_date < calendar_day(start_date):
            raise RuleValidationError(
                f"end_date {end_date.isoformat()} precedes start_date "
                f"{calendar_day(start_date).isoformat()}",
                "end_date",
            )

    return RecurrenceRule(
        frequency=parsed_frequency,
        interval=parsed_interval,
        start_date=start_date,
        end_date=end_date,
        day_of_month=validate_day_of_month(day_of_month),
        day_of_week=validate_day_of_week(day_of_week),
    )


def is_past_end(rule: RecurrenceRule, candidate: date) -> bool:
    """True when candidate falls on a calendar day strictly after end_date."""
    return rule.end_date is not None and calendar_day(candidate) > rule.end_date
