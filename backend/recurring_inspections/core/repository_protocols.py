"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by the surrounding application via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: boundary methods are async because implementations do IO,
      but core pure functions are never async themselves — the shell orchestrates
      the async calls around the pure logic
    - save_state takes the expected old next_due_date: storage performs compare-and-swap,
      so concurrent or repeated ticks cannot advance one schedule twice
"""

from datetime import date, datetime
from typing import Protocol

from recurring_inspections.core.domain_types import (
    InspectionId, InspectionStatus, ScheduleId,
)
from recurring_inspections.core.recurrence_rule import RecurrenceRule
from recurring_inspections.core.schedule_state import ScheduleState


class RecurringScheduleLike(Protocol):
    """Structural contract for a persisted recurring-inspection schedule.

    title and inspection_type are copied verbatim onto materialized inspections
    and preview entries; the scheduler never computes them.
    """
    id: ScheduleId
    title: str
    inspection_type: str
    rule: RecurrenceRule
    state: ScheduleState


class RecurringScheduleRepository(Protocol):
    """Contract for schedule persistence — implemented by the application."""
    async def list_due(
        self, now: datetime, look_ahead_until: date,
    ) -> list[RecurringScheduleLike]: ...
    async def save_state(
        self,
        schedule_id: ScheduleId,
        expected_next_due: date,
        state: ScheduleState,
    ) -> bool: ...


class InspectionRepository(Protocol):
    """Contract for inspection materialization — implemented by the application."""
    async def exists_for(
        self, schedule_id: ScheduleId, scheduled_date: date,
    ) -> bool: ...
    async def create_from_schedule(
        self,
        schedule: RecurringScheduleLike,
        scheduled_date: date,
        status: InspectionStatus,
    ) -> InspectionId: ...
