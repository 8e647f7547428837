"""Cancellable repeating timers.

The scheduler only talks to a TimerFactory, so the same dispatch code
runs on an asyncio loop in production and on a manually advanced clock
in tests.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
import logging
from dataclasses import dataclass, field
from typing import Callable, Protocol

from .events import now_ms


logger = logging.getLogger(__name__)

Tick = Callable[[], None]


class TimerHandle(Protocol):
    @property
    def cancelled(self) -> bool: ...

    def cancel(self) -> None: ...


class TimerFactory(Protocol):
    def call_every(self, interval_ms: int, callback: Tick, name: str = "") -> TimerHandle: ...

    def now_ms(self) -> int: ...


class _AsyncioTimer:
    """Sleep-then-tick loop running as one asyncio task."""

    def __init__(self, interval_ms: int, callback: Tick, name: str):
        if interval_ms <= 0:
            raise ValueError("interval_ms must be > 0")
        self.interval_ms = interval_ms
        self.callback = callback
        self.name = name
        self._cancelled = False
        self._task: asyncio.Task = asyncio.get_running_loop().create_task(
            self._run(), name=f"hooklytics-{name}" if name else None
        )

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        self._task.cancel()

    async def _run(self) -> None:
        interval = self.interval_ms / 1000
        while not self._cancelled:
            try:
                await asyncio.sleep(interval)
                if self._cancelled:
                    break
                self.callback()
            except asyncio.CancelledError:
                logger.debug(f"Timer {self.name or id(self)} cancelled")
                break
            except Exception:
                logger.exception(f"Timer {self.name or id(self)} tick failed")


class AsyncioTimers:
    """
    Timers on the running asyncio loop.

    call_every() must be called from inside a running loop.
    """

    def call_every(self, interval_ms: int, callback: Tick, name: str = "") -> _AsyncioTimer:
        return _AsyncioTimer(interval_ms, callback, name)

    def now_ms(self) -> int:
        return now_ms()


@dataclass
class _VirtualTimer:
    interval_ms: int
    callback: Tick
    name: str
    next_due: int
    _cancelled: bool = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


@dataclass
class VirtualTimers:
    """
    Manually advanced clock for deterministic scheduling.

    Usage:
        timers = VirtualTimers()
        timers.call_every(1000, tick)
        timers.advance(3000)   # tick runs three times
    """
    start_ms: int = 0

    _now: int = field(default=0, init=False)
    _heap: list = field(default_factory=list, init=False)
    _seq: itertools.count = field(default_factory=itertools.count, init=False)

    def __post_init__(self):
        self._now = self.start_ms

    def now_ms(self) -> int:
        return self._now

    def call_every(self, interval_ms: int, callback: Tick, name: str = "") -> _VirtualTimer:
        if interval_ms <= 0:
            raise ValueError("interval_ms must be > 0")
        timer = _VirtualTimer(interval_ms, callback, name, self._now + interval_ms)
        heapq.heappush(self._heap, (timer.next_due, next(self._seq), timer))
        return timer

    def advance(self, ms: int) -> None:
        """Move the clock forward, firing every tick that falls due."""
        target = self._now + ms
        while self._heap and self._heap[0][0] <= target:
            due, _, timer = heapq.heappop(self._heap)
            if timer.cancelled:
                continue
            self._now = due
            try:
                timer.callback()
            except Exception:
                logger.exception(f"Timer {timer.name or id(timer)} tick failed")
            if not timer.cancelled:
                timer.next_due = due + timer.interval_ms
                heapq.heappush(self._heap, (timer.next_due, next(self._seq), timer))
        self._now = target

    @property
    def pending(self) -> int:
        """Number of live timers."""
        return sum(1 for _, _, timer in self._heap if not timer.cancelled)
