"""Recurring Generation — materializes due schedules into inspections and advances their state.

Invariants:
    - At most one inspection per (schedule_id, scheduled_date): existing ones are not recreated
    - State is saved with compare-and-swap on the old next_due_date; a lost race is skipped
    - One failing schedule never aborts the tick (logged, counted in failed_count)
    - A schedule whose new next_due_date passes end_date is saved inactive

Design Decisions:
    - Repository returns candidates, core.is_due() has the final word: the storage query
      may be coarser than the predicate without generating early inspections
    - list_due failure raises RepositoryError: nothing was processed, caller decides on retry
"""

import logging
from dataclasses import dataclass, asdict
from datetime import datetime, timedelta, timezone

from recurring_inspections.config import Settings, get_settings
from recurring_inspections.core.domain_types import InspectionStatus
from recurring_inspections.core.errors import RepositoryError, SchedulerError
from recurring_inspections.core.recurrence_rule import calendar_day
from recurring_inspections.core.repository_protocols import (
    InspectionRepository, RecurringScheduleLike, RecurringScheduleRepository,
)
from recurring_inspections.core.schedule_state import is_due, mark_generated

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    """Counters for one generation tick."""
    generated_count: int = 0
    advanced_count: int = 0
    deactivated_count: int = 0
    conflict_count: int = 0
    failed_count: int = 0

    @property
    def success(self) -> bool:
        return self.failed_count == 0

    def to_dict(self) -> dict:
        return {"success": self.success, **asdict(self)}


async def generate_recurring_inspections(
    schedules: RecurringScheduleRepository,
    inspections: InspectionRepository,
    now: datetime | None = None,
    look_ahead_days: int | None = None,
    settings: Settings | None = None,
) -> GenerationResult:
    """Run one generation tick over every schedule due within the look-ahead window."""
    settings = settings or get_settings()
    now = now or datetime.now(timezone.utc)
    if look_ahead_days is None:
        look_ahead_days = settings.generation_look_ahead_days
    look_ahead_until = calendar_day(now) + timedelta(days=look_ahead_days)

    logger.info("Starting recurring inspection generation")
    try:
        candidates = await schedules.list_due(now, look_ahead_until)
    except Exception as e:
        logger.error(f"Failed to load due schedules: {e}", exc_info=True)
        raise RepositoryError(str(e), "list_due") from e

    due = [s for s in candidates if is_due(s.rule, s.state, now, look_ahead_days)]
    logger.info(f"Found {len(due)} recurring schedule(s) due")

    result = GenerationResult()
    for schedule in due:
        try:
            await _process_schedule(schedule, schedules, inspections, now, result)
        except Exception as e:
            result.failed_count += 1
            extra = {"schedule_id": schedule.id}
            if isinstance(e, SchedulerError):
                extra.update(e.to_log_extra())
            logger.error(
                f"Error processing recurring schedule: {e}", exc_info=True, extra=extra,
            )

    logger.info(
        f"Generation complete. Created {result.generated_count} inspection(s)",
        extra=asdict(result),
    )
    return result


async def _process_schedule(
    schedule: RecurringScheduleLike,
    schedules: RecurringScheduleRepository,
    inspections: InspectionRepository,
    now: datetime,
    result: GenerationResult,
) -> None:
    due_date = schedule.state.next_due_date

    if await inspections.exists_for(schedule.id, due_date):
        logger.info(
            "Inspection already exists for scheduled date; advancing only",
            extra={"schedule_id": schedule.id, "scheduled_date": due_date.isoformat()},
        )
    else:
        inspection_id = await inspections.create_from_schedule(
            schedule, due_date, InspectionStatus.SCHEDULED,
        )
        result.generated_count += 1
        logger.info(
            "Created inspection from recurring schedule",
            extra={
                "schedule_id": schedule.id,
                "inspection_id": inspection_id,
                "scheduled_date": due_date.isoformat(),
            },
        )

    new_state = mark_generated(schedule.rule, schedule.state, now)
    saved = await schedules.save_state(schedule.id, due_date, new_state)
    if not saved:
        result.conflict_count += 1
        logger.warning(
            "Schedule advanced concurrently; skipping state update",
            extra={"schedule_id": schedule.id, "error_code": "STATE_CONFLICT"},
        )
        return

    result.advanced_count += 1
    if not new_state.is_active:
        result.deactivated_count += 1
        logger.info(
            "Deactivated recurring schedule: end date reached",
            extra={"schedule_id": schedule.id},
        )

