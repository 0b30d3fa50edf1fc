"""Generation Worker — periodic async loop driving the recurring generation tick.

Invariants:
    - Runs one tick immediately on start, then every poll_seconds until stop_event is set
    - An exception inside a tick is logged and never escapes the loop
    - Stopping interrupts the wait between ticks (no full poll interval delay)

Design Decisions:
    - asyncio.Event over thread + sleep: the repositories are async, the loop shares
      the host application's event loop
    - clock injectable: ticks are reproducible in tests
"""

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime, timezone

from recurring_inspections.config import Settings, get_settings
from recurring_inspections.core.errors import SchedulerError
from recurring_inspections.core.repository_protocols import (
    InspectionRepository, RecurringScheduleRepository,
)
from recurring_inspections.infrastructure.observability import setup_logging
from recurring_inspections.services.generate_recurring import (
    GenerationResult, generate_recurring_inspections,
)

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class GenerationWorker:
    """Runs generate_recurring_inspections on a fixed poll interval."""

    def __init__(
        self,
        schedules: RecurringScheduleRepository,
        inspections: InspectionRepository,
        settings: Settings | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self.schedules = schedules
        self.inspections = inspections
        self.settings = settings or get_settings()
        self.clock = clock
        self.ticks = 0

    async def run_once(self) -> GenerationResult | None:
        """Single tick. Returns None when the tick failed as a whole."""
        self.ticks += 1
        try:
            return await generate_recurring_inspections(
                self.schedules,
                self.inspections,
                now=self.clock(),
                look_ahead_days=self.settings.generation_look_ahead_days,
                settings=self.settings,
            )
        except Exception as e:
            logger.error(
                f"Recurring generation tick failed: {e}",
                exc_info=True,
                extra=e.to_log_extra() if isinstance(e, SchedulerError) else None,
            )
            return None

    async def trigger(self) -> GenerationResult | None:
        """Manual 'generate now' action outside the poll schedule."""
        logger.info("Manual recurring generation trigger requested")
        return await self.run_once()

    async def run(self, stop_event: asyncio.Event) -> None:
        logger.info(
            f"Recurring generation worker started "
            f"(every {self.settings.generation_poll_seconds}s)",
        )
        while not stop_event.is_set():
            await self.run_once()
            try:
                await asyncio.wait_for(
                    stop_event.wait(), timeout=self.settings.generation_poll_seconds,
                )
            except asyncio.TimeoutError:
                pass
        logger.info("Recurring generation worker stopped")


async def run_generation_worker(
    schedules: RecurringScheduleRepository,
    inspections: InspectionRepository,
    stop_event: asyncio.Event,
    settings: Settings | None = None,
) -> None:
    """Entry point for the host process: configure logging, then loop until stopped."""
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.log_format)
    await GenerationWorker(schedules, inspections, settings=settings).run(stop_event)
