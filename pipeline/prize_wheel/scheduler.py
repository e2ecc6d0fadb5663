"""Deferred-callback schedulers used to settle a spin."""

from __future__ import annotations
import asyncio
import heapq
import itertools
from typing import Callable, List, Optional, Protocol, Tuple


class Scheduler(Protocol):
    """One-shot, fire-and-forget deferred execution."""

    def schedule(self, delay_seconds: float, callback: Callable[[], None]) -> None:
        ...


class AsyncioScheduler:
    """
    Run callbacks on an asyncio event loop via ``call_later``.

    Callbacks execute on the loop thread, the same thread that serves the
    async endpoints mutating the wheel.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    def schedule(self, delay_seconds: float, callback: Callable[[], None]) -> None:
        loop = self._loop or asyncio.get_running_loop()
        loop.call_later(max(0.0, delay_seconds), callback)


class ManualScheduler:
    """
    Virtual-clock scheduler driven by ``advance``.

    Used by the offline simulator and tests so that spins settle without
    waiting for wall-clock time.
    """

    def __init__(self) -> None:
        self._now = 0.0
        self._counter = itertools.count()
        self._pending: List[Tuple[float, int, Callable[[], None]]] = []

    @property
    def now(self) -> float:
        return self._now

    @property
    def pending(self) -> int:
        return len(self._pending)

    def schedule(self, delay_seconds: float, callback: Callable[[], None]) -> None:
        due = self._now + max(0.0, delay_seconds)
        heapq.heappush(self._pending, (due, next(self._counter), callback))

    def advance(self, seconds: float) -> int:
        """
        Move the clock forward and fire every callback that became due.

        Args:
            seconds: Virtual time to advance

        Returns:
            Number of callbacks fired
        """
        target = self._now + seconds
        fired = 0
        while self._pending and self._pending[0][0] <= target:
            due, _, callback = heapq.heappop(self._pending)
            self._now = due
            callback()
            fired += 1
        self._now = target
        return fired

    def run_all(self) -> int:
        """Fire every pending callback in due order."""
        fired = 0
        while self._pending:
            due, _, callback = heapq.heappop(self._pending)
            self._now = max(self._now, due)
            callback()
            fired += 1
        return fired
