"""Schedule Preview — compute-preview call shape: clamped count, title/type decoration.

Invariants:
    - count is clamped to [0, settings.preview_max_count]; None means preview_default_count
    - title and type are copied verbatim onto every entry, never computed
    - Preview never mutates ScheduleState (read-only projection)
    - Unsaved rules preview from start_date; saved schedules preview from next_due_date

Design Decisions:
    - Clamp lives here, not in core.preview: the ceiling is an application setting,
      the generator itself has none (ADR: caller bounds open-ended rules)
"""

import logging
from datetime import date

from recurring_inspections.config import Settings, get_settings
from recurring_inspections.core.preview import preview
from recurring_inspections.core.recurrence_rule import RecurrenceRule
from recurring_inspections.core.repository_protocols import RecurringScheduleLike
from recurring_inspections.schemas.recurrence import (
    PreviewEntry, PreviewRequest, PreviewResponse,
)

logger = logging.getLogger(__name__)


def clamp_preview_count(count: int | None, settings: Settings | None = None) -> int:
    settings = settings or get_settings()
    if count is None:
        count = settings.preview_default_count
    return max(0, min(count, settings.preview_max_count))


def build_preview(
    rule: RecurrenceRule,
    *,
    title: str,
    inspection_type: str,
    count: int | None = None,
    start_from: date | None = None,
    settings: Settings | None = None,
) -> list[PreviewEntry]:
    """Upcoming occurrences of rule decorated with pass-through metadata."""
    bounded = clamp_preview_count(count, settings)
    first = start_from if start_from is not None else rule.start_date
    occurrences = preview(rule, first, bounded)
    logger.debug(
        f"Preview of {len(occurrences)}/{bounded} occurrence(s) "
        f"for {rule.frequency.value} every {rule.interval}",
    )
    return [
        PreviewEntry(
            scheduled_date=o.scheduled_date, title=title, type=inspection_type,
        )
        for o in occurrences
    ]


def preview_from_request(
    request: PreviewRequest, settings: Settings | None = None,
) -> PreviewResponse:
    """Preview for a schedule that hasn't been saved yet."""
    return PreviewResponse(previews=build_preview(
        request.to_rule(),
        title=request.title,
        inspection_type=request.inspection_type,
        count=request.count,
        settings=settings,
    ))


def preview_schedule(
    schedule: RecurringScheduleLike,
    count: int | None = None,
    settings: Settings | None = None,
) -> PreviewResponse:
    """Preview for a saved schedule, starting at its current next_due_date."""
    return PreviewResponse(previews=build_preview(
        schedule.rule,
        title=schedule.title,
        inspection_type=schedule.inspection_type,
        count=count,
        start_from=schedule.state.next_due_date,
        settings=settings,
    ))
