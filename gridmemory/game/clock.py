"""
Clocks and cancellable background processes for the game engine.

The engine never calls asyncio.sleep directly; it suspends through a Clock
so tests can fast-forward time deterministically with ManualClock.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from abc import ABC, abstractmethod
from typing import Coroutine

logger = logging.getLogger(__name__)


class Clock(ABC):
    """Source of time and timed suspension."""

    @abstractmethod
    def now(self) -> float:
        """Monotonic time in seconds."""
        ...

    @abstractmethod
    async def sleep(self, seconds: float) -> None:
        """Suspend the calling task for the given number of seconds."""
        ...


class AsyncioClock(Clock):
    """Real time, backed by the running event loop."""

    def now(self) -> float:
        return asyncio.get_running_loop().time()

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)


class ManualClock(Clock):
    """
    Virtual time that only moves when advance() is awaited.

    Sleepers are woken in deadline order, and the event loop is drained
    after each wake-up so that chained sleeps inside one advance() behave
    exactly as they would in real time.
    """

    # Loop iterations given to woken tasks before the next deadline fires
    DRAIN_ITERATIONS = 50

    def __init__(self, start: float = 0.0) -> None:
        self._now = start
        self._counter = itertools.count()
        self._sleepers: dict[int, tuple[float, asyncio.Future]] = {}

    def now(self) -> float:
        return self._now

    @property
    def pending(self) -> int:
        """Number of tasks currently sleeping on this clock."""
        return len(self._sleepers)

    async def sleep(self, seconds: float) -> None:
        future = asyncio.get_running_loop().create_future()
        key = next(self._counter)
        self._sleepers[key] = (self._now + max(seconds, 0.0), future)
        try:
            await future
        finally:
            self._sleepers.pop(key, None)

    async def advance(self, seconds: float) -> None:
        """Move time forward, waking every sleeper whose deadline passes."""
        target = self._now + seconds
        await self.drain()
        while True:
            due = [deadline for deadline, _ in self._sleepers.values() if deadline <= target + 1e-9]
            if not due:
                break
            self._now = max(self._now, min(due))
            for key, (deadline, future) in list(self._sleepers.items()):
                if deadline <= self._now + 1e-9:
                    self._sleepers.pop(key)
                    if not future.done():
                        future.set_result(None)
            await self.drain()
        self._now = target

    async def drain(self) -> None:
        """Let every runnable task progress to its next suspension point."""
        for _ in range(self.DRAIN_ITERATIONS):
            await asyncio.sleep(0)


class Process:
    """
    Single-flight slot for one named background coroutine.

    Starting a new coroutine cancels the previous one. Cancellation is
    idempotent and never raises.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self, coro: Coroutine) -> asyncio.Task:
        self.cancel()
        self._task = asyncio.get_running_loop().create_task(coro, name=self.name)
        return self._task

    def cancel(self) -> None:
        task = self._task
        self._task = None
        if task is None or task.done():
            return
        # A process may end itself (e.g. the timer triggering game over)
        if task is asyncio.current_task():
            return
        logger.debug(f"Cancelling {self.name} process")
        task.cancel()
