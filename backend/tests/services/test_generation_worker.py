"""Generation Worker — tests for the periodic loop and manual trigger."""

import asyncio
import logging
from datetime import date, datetime, timezone

from recurring_inspections.config import Settings
from recurring_inspections.core.domain_types import Frequency
from recurring_inspections.core.recurrence_rule import create_rule
from recurring_inspections.services.generation_worker import (
    GenerationWorker, run_generation_worker,
)

NOW = datetime(2024, 1, 1, 2, 0, tzinfo=timezone.utc)
DAILY = create_rule(Frequency.DAILY, 1, date(2023, 12, 1))


async def test_run_once_uses_injected_clock(
    schedule_repo, inspection_repo, settings, make_schedule,
):
    make_schedule(DAILY, date(2024, 1, 1))
    worker = GenerationWorker(schedule_repo, inspection_repo, settings, clock=lambda: NOW)

    result = await worker.run_once()

    assert result.generated_count == 1
    assert worker.ticks == 1
    assert inspection_repo.created[0]["scheduled_date"] == date(2024, 1, 1)


async def test_failed_tick_returns_none_and_is_logged(
    schedule_repo, inspection_repo, settings, caplog,
):
    schedule_repo.fail_list = True
    worker = GenerationWorker(schedule_repo, inspection_repo, settings, clock=lambda: NOW)

    with caplog.at_level(logging.ERROR):
        result = await worker.run_once()

    assert result is None
    assert any(
        getattr(r, "error_code", None) == "REPOSITORY_ERROR" for r in caplog.records
    )


async def test_trigger_runs_a_tick(schedule_repo, inspection_repo, settings, make_schedule):
    make_schedule(DAILY, date(2024, 1, 3))
    worker = GenerationWorker(schedule_repo, inspection_repo, settings, clock=lambda: NOW)

    result = await worker.trigger()

    assert result.generated_count == 1
    assert worker.ticks == 1


async def test_run_ticks_immediately_and_stops_without_waiting(
    schedule_repo, inspection_repo, settings, make_schedule,
):
    make_schedule(DAILY, date(2024, 1, 1))
    stop = asyncio.Event()

    def clock():
        stop.set()
        return NOW

    worker = GenerationWorker(schedule_repo, inspection_repo, settings, clock=clock)
    await asyncio.wait_for(worker.run(stop), timeout=5)

    assert worker.ticks == 1
    assert len(inspection_repo.created) == 1


async def test_run_polls_again_after_interval(schedule_repo, inspection_repo, make_schedule):
    make_schedule(DAILY, date(2024, 1, 1))
    stop = asyncio.Event()
    calls = []

    def clock():
        calls.append(1)
        if len(calls) == 2:
            stop.set()
        return NOW

    fast = Settings(generation_poll_seconds=0.01)
    worker = GenerationWorker(schedule_repo, inspection_repo, fast, clock=clock)
    await asyncio.wait_for(worker.run(stop), timeout=5)

    assert worker.ticks == 2
    # one occurrence per tick: Jan 1, then Jan 2 (still inside the window)
    assert [i["scheduled_date"] for i in inspection_repo.created] == [
        date(2024, 1, 1), date(2024, 1, 2),
    ]


async def test_run_generation_worker_configures_logging(
    schedule_repo, inspection_repo,
):
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    stop = asyncio.Event()
    stop.set()
    try:
        await run_generation_worker(
            schedule_repo, inspection_repo, stop,
            settings=Settings(log_level="WARNING", log_format="text"),
        )
        assert root.level == logging.WARNING
        assert len(root.handlers) == len(handlers) + 1
    finally:
        root.handlers = handlers
        root.setLevel(level)
