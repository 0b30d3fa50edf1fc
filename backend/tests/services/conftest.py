"""Service test fixtures — in-memory repositories implementing the boundary protocols.

Invariants:
    - Every test gets fresh repositories (no state shared across tests)
    - InMemoryScheduleRepository.save_state is a real compare-and-swap on next_due_date
    - Failure switches (fail_list, fail_create_for, stale_ids) simulate storage faults

Design Decisions:
    - Fakes over mocks: the generation tick is exercised against the same contract
      an application repository implements
"""

from dataclasses import dataclass, replace
from datetime import date, datetime
from uuid import uuid4

import pytest

from recurring_inspections.config import Settings
from recurring_inspections.core.domain_types import (
    InspectionId, InspectionStatus, ScheduleId,
)
from recurring_inspections.core.recurrence_rule import RecurrenceRule, calendar_day
from recurring_inspections.core.schedule_state import ScheduleState


@dataclass(frozen=True)
class FakeSchedule:
    id: ScheduleId
    title: str
    inspection_type: str
    rule: RecurrenceRule
    state: ScheduleState


class InMemoryScheduleRepository:
    def __init__(self):
        self.schedules: dict[ScheduleId, FakeSchedule] = {}
        self.fail_list = False
        self.stale_ids: set[ScheduleId] = set()

    def add(self, schedule: FakeSchedule) -> FakeSchedule:
        self.schedules[schedule.id] = schedule
        return schedule

    async def list_due(self, now: datetime, look_ahead_until: date) -> list[FakeSchedule]:
        if self.fail_list:
            raise RuntimeError("connection lost")
        return [
            s for s in self.schedules.values()
            if s.state.is_active
            and calendar_day(s.state.next_due_date) <= look_ahead_until
        ]

    async def save_state(
        self, schedule_id: ScheduleId, expected_next_due: date, state: ScheduleState,
    ) -> bool:
        current = self.schedules[schedule_id]
        if schedule_id in self.stale_ids or current.state.next_due_date != expected_next_due:
            return False
        self.schedules[schedule_id] = replace(current, state=state)
        return True


class InMemoryInspectionRepository:
    def __init__(self):
        self.created: list[dict] = []
        self.fail_create_for: set[ScheduleId] = set()

    async def exists_for(self, schedule_id: ScheduleId, scheduled_date: date) -> bool:
        return any(
            i["schedule_id"] == schedule_id and i["scheduled_date"] == scheduled_date
            for i in self.created
        )

    async def create_from_schedule(
        self, schedule: FakeSchedule, scheduled_date: date, status: InspectionStatus,
    ) -> InspectionId:
        if schedule.id in self.fail_create_for:
            raise RuntimeError("insert failed")
        inspection_id = InspectionId(uuid4())
        self.created.append({
            "id": inspection_id,
            "schedule_id": schedule.id,
            "scheduled_date": scheduled_date,
            "title": schedule.title,
            "type": schedule.inspection_type,
            "status": status,
        })
        return inspection_id


@pytest.fixture
def schedule_repo():
    return InMemoryScheduleRepository()


@pytest.fixture
def inspection_repo():
    return InMemoryInspectionRepository()


@pytest.fixture
def settings():
    return Settings(
        preview_default_count=10,
        preview_max_count=20,
        generation_look_ahead_days=7,
        generation_poll_seconds=3600,
    )


@pytest.fixture
def make_schedule(schedule_repo):
    """Factory: make_schedule(rule, next_due_date, **state_fields) -> stored FakeSchedule."""
    def _make(
        rule: RecurrenceRule,
        next_due_date: date,
        title: str = "Quarterly smoke alarm check",
        inspection_type: str = "ROUTINE",
        **state_fields,
    ) -> FakeSchedule:
        return schedule_repo.add(FakeSchedule(
            id=ScheduleId(uuid4()),
            title=title,
            inspection_type=inspection_type,
            rule=rule,
            state=ScheduleState(next_due_date=next_due_date, **state_fields),
        ))
    return _make
