"""Date Advancer — calendar arithmetic that rolls a due date forward by one step.

Invariants:
    - advance() is PURE: same (rule, from_date) always yields the same date, nothing mutated
    - advance(rule, d) > d for every valid rule (strictly forward)
    - Time-of-day of a datetime input is preserved
    - day_of_week numbering is Sunday=0 .. Saturday=6
    - Unknown frequency raises InvalidFrequencyError — never a silent no-op

Design Decisions:
    - Month/year overflow CLAMPS via dateutil.relativedelta: Jan 31 + 1 month = Feb 28/29,
      Feb 29 + 1 year = Feb 28 (ADR: no roll-over into the next month)
    - day_of_month applied as relativedelta(day=...): clamps to the target month's last day
    - WEEKLY anchor shift applied once after the interval jump, always forward (0–6 days)
"""

from datetime import date, timedelta

from dateutil.relativedelta import relativedelta

from recurring_inspections.core.domain_types import Frequency
from recurring_inspections.core.errors import InvalidFrequencyError
from recurring_inspections.core.recurrence_rule import (
    RecurrenceRule, create_rule,
)


DAYS_PER_WEEK: int = 7
MONTHS_PER_QUARTER: int = 3


def sunday_based_weekday(value: date) -> int:
    """Weekday with Sunday=0, Monday=1 .. Saturday=6."""
    return value.isoweekday() % DAYS_PER_WEEK


def _shift_to_weekday(value: date, day_of_week: int) -> date:
    days_to_add = (day_of_week - sunday_based_weekday(value) + DAYS_PER_WEEK) % DAYS_PER_WEEK
    return value + timedelta(days=days_to_add)


def advance(rule: RecurrenceRule, from_date: date) -> date:
    """Compute the occurrence that follows from_date under rule."""
    match rule.frequency:
        case Frequency.DAILY:
            return from_date + timedelta(days=rule.interval)
        case Frequency.WEEKLY:
            result = from_date + timedelta(days=rule.interval * DAYS_PER_WEEK)
            if rule.day_of_week is not None:
                result = _shift_to_weekday(result, rule.day_of_week)
            return result
        case Frequency.MONTHLY:
            if rule.day_of_month is not None:
                return from_date + relativedelta(
                    months=rule.interval, day=rule.day_of_month,
                )
            return from_date + relativedelta(months=rule.interval)
        case Frequency.QUARTERLY:
            return from_date + relativedelta(
                months=rule.interval * MONTHS_PER_QUARTER,
            )
        case Frequency.YEARLY:
            return from_date + relativedelta(years=rule.interval)
        case _:
            raise InvalidFrequencyError(rule.frequency)


def compute_next_due_date(
    frequency: Frequency | str,
    interval: int,
    reference_date: date,
    day_of_month: int | None = None,
    day_of_week: int | None = None,
) -> date:
    """Compute-next-due from loose fields: validate like create_rule, then advance.

    reference_date is the start date on schedule creation, "now" after a
    recurrence edit, or the just-used due date after a materialization.
    """
    rule = create_rule(
        frequency=frequency,
        interval=interval,
        start_date=reference_date,
        day_of_month=day_of_month,
        day_of_week=day_of_week,
    )
    return advance(rule, reference_date)
