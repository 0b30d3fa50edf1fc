"""Schedule State — explicit next-due snapshot passed into and returned from pure transitions.

Invariants:
    - Transitions never mutate: every function returns a new ScheduleState
    - mark_generated moves next_due_date strictly forward (via advance)
    - A state whose next_due_date passed end_date is inactive; mark_generated refuses it
    - is_due mirrors the generation query: active, within look-ahead, end_date not in the past

Design Decisions:
    - Frozen dataclass, not an ORM row: storage and compare-and-swap belong to the shell
      (ADR: functional core, imperative shell)
    - Comparisons on calendar days: next_due_date may be a date or a datetime without
      breaking the look-ahead window
"""

from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta

from recurring_inspections.core.date_advancer import advance
from recurring_inspections.core.errors import ScheduleInactiveError
from recurring_inspections.core.recurrence_rule import (
    RecurrenceRule, calendar_day, is_past_end,
)


@dataclass(frozen=True)
class ScheduleState:
    """Persisted scheduling position of one recurring inspection."""
    next_due_date: date
    last_generated_date: datetime | None = None
    is_active: bool = True


def initial_schedule_state(rule: RecurrenceRule) -> ScheduleState:
    """First state of a new schedule: one step past start_date."""
    next_due = advance(rule, rule.start_date)
    return ScheduleState(
        next_due_date=next_due,
        is_active=not is_past_end(rule, next_due),
    )


def mark_generated(
    rule: RecurrenceRule, state: ScheduleState, generated_at: datetime,
) -> ScheduleState:
    """Roll state forward after the occurrence at next_due_date was materialized."""
    if not state.is_active:
        raise ScheduleInactiveError()
    next_due = advance(rule, state.next_due_date)
    return ScheduleState(
        next_due_date=next_due,
        last_generated_date=generated_at,
        is_active=not is_past_end(rule, next_due),
    )


def reanchor_schedule_state(
    rule: RecurrenceRule, state: ScheduleState, now: date,
) -> ScheduleState:
    """Recompute next_due_date from now after the recurrence fields were edited."""
    next_due = advance(rule, now)
    return replace(
        state,
        next_due_date=next_due,
        is_active=state.is_active and not is_past_end(rule, next_due),
    )


def is_due(
    rule: RecurrenceRule, state: ScheduleState, now: date, look_ahead_days: int,
) -> bool:
    """True when the shell should materialize state.next_due_date on this tick."""
    if not state.is_active:
        return False
    today = calendar_day(now)
    if rule.end_date is not None and rule.end_date < today:
        return False
    return calendar_day(state.next_due_date) <= today + timedelta(days=look_ahead_days)
