"""Schedule Lifecycle — create a schedule's first state and re-anchor it after edits.

Invariants:
    - A new schedule's next_due_date is one step past start_date
    - Editing frequency/interval/anchors/start_date re-anchors next_due_date from "now"
    - Editing only end_date keeps next_due_date and only re-checks the end bound
    - is_active pauses or resumes; a schedule whose next_due_date is past end_date stays inactive
    - Re-anchoring a date-only schedule keeps next_due_date a plain date

Design Decisions:
    - Returns (rule, state) pairs instead of saving: persistence belongs to the caller
"""

import logging
from dataclasses import replace
from datetime import date, datetime, timezone

from recurring_inspections.core.recurrence_rule import (
    RecurrenceRule, calendar_day, is_past_end,
)
from recurring_inspections.core.schedule_state import (
    ScheduleState, initial_schedule_state, reanchor_schedule_state,
)
from recurring_inspections.schemas.recurrence import (
    RecurrenceRuleInput, RecurrenceUpdate, validate_input,
)

logger = logging.getLogger(__name__)


def create_schedule(rule: RecurrenceRule) -> ScheduleState:
    """Initial state for a newly created recurring schedule."""
    state = initial_schedule_state(rule)
    logger.info(
        f"Recurring schedule created: {rule.frequency.value} every {rule.interval}",
        extra={"scheduled_date": state.next_due_date.isoformat()},
    )
    return state


def create_schedule_from_input(data: dict) -> tuple[RecurrenceRule, ScheduleState]:
    """Validate raw recurrence fields and build the first state."""
    rule = RecurrenceRuleInput.parse_rule(data)
    return rule, create_schedule(rule)


def update_recurrence(
    rule: RecurrenceRule,
    state: ScheduleState,
    data: dict,
    now: date | None = None,
) -> tuple[RecurrenceRule, ScheduleState]:
    """Apply a partial recurrence edit and return the updated (rule, state)."""
    update = validate_input(RecurrenceUpdate, data)
    new_rule = update.merge_into(rule)

    requested = state
    if update.is_active is not None:
        requested = replace(state, is_active=update.is_active)
        logger.info(f"Recurring schedule {'resumed' if update.is_active else 'paused'} by edit")

    if update.recurrence_changed:
        now = now or datetime.now(timezone.utc)
        if not isinstance(state.next_due_date, datetime):
            now = calendar_day(now)
        new_state = reanchor_schedule_state(new_rule, requested, now)
        logger.info(
            "Recurrence edited; next due date re-anchored",
            extra={"scheduled_date": new_state.next_due_date.isoformat()},
        )
    else:
        new_state = replace(
            requested,
            is_active=requested.is_active and not is_past_end(new_rule, state.next_due_date),
        )

    if requested.is_active and not new_state.is_active:
        logger.info("Recurring schedule deactivated by edit: next due date past end date")
    return new_rule, new_state
