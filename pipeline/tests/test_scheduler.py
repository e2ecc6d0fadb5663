from __future__ import annotations

import asyncio

from pipeline.prize_wheel.scheduler import AsyncioScheduler, ManualScheduler


def test_manual_scheduler_fires_only_due_callbacks():
    scheduler = ManualScheduler()
    fired: list[str] = []

    scheduler.schedule(4.0, lambda: fired.append("settle"))

    assert scheduler.advance(3.999) == 0
    assert fired == []
    assert scheduler.advance(0.001) == 1
    assert fired == ["settle"]
    assert scheduler.pending == 0


def test_manual_scheduler_fires_in_due_order():
    scheduler = ManualScheduler()
    fired: list[int] = []

    scheduler.schedule(2.0, lambda: fired.append(2))
    scheduler.schedule(1.0, lambda: fired.append(1))
    scheduler.schedule(1.0, lambda: fired.append(11))

    assert scheduler.run_all() == 3
    assert fired == [1, 11, 2]
    assert scheduler.now == 2.0


def test_manual_scheduler_runs_callbacks_scheduled_by_callbacks():
    scheduler = ManualScheduler()
    fired: list[float] = []

    def first():
        fired.append(scheduler.now)
        scheduler.schedule(1.0, lambda: fired.append(scheduler.now))

    scheduler.schedule(1.0, first)
    scheduler.advance(5.0)

    assert fired == [1.0, 2.0]
    assert scheduler.now == 5.0


def test_asyncio_scheduler_runs_on_the_event_loop():
    fired: list[bool] = []

    async def _run() -> None:
        loop = asyncio.get_running_loop()
        done = loop.create_future()

        def _callback() -> None:
            fired.append(asyncio.get_running_loop() is loop)
            done.set_result(None)

        AsyncioScheduler().schedule(0.01, _callback)
        await asyncio.wait_for(done, timeout=2)

    asyncio.run(_run())

    assert fired == [True]
