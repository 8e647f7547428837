"""Base sink interface and the sink-to-listener bridge."""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Callable

from ..events import Event


logger = logging.getLogger(__name__)


class EventSink(ABC):
    """
    Abstract base class for event sinks.

    Sinks receive batches of events and deliver them to a destination
    (console, file, collector endpoint, message queue).
    """

    @abstractmethod
    async def send(self, events: list[Event]) -> None:
        """Send a batch of events to the sink."""
        ...

    async def start(self) -> None:
        """Initialize the sink (called on startup)."""
        pass

    async def stop(self) -> None:
        """Clean up the sink (called on shutdown)."""
        pass

    async def health_check(self) -> bool:
        """Check if the sink is healthy."""
        return True


class SinkListener:
    """
    Synchronous listener that forwards each batch to an async sink.

    The send is scheduled as a task on the running loop so the flush
    tick never waits on the transport. Failed sends are logged and
    counted; they never reach the scheduler.

    Usage:
        listener = sink_listener(ConsoleSink())
        provider.set_listener(listener)
        ...
        await listener.drain()
    """

    def __init__(self, sink: EventSink):
        self.sink = sink
        self._pending: set[asyncio.Task] = set()
        self._stats = {
            "batches": 0,
            "errors": 0,
        }

    def __call__(self, events: list[Event]) -> None:
        task = asyncio.get_running_loop().create_task(self.sink.send(events))
        self._pending.add(task)
        task.add_done_callback(self._on_done)

    def _on_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Sink {type(self.sink).__name__} failed to send batch: {error}")
            self._stats["errors"] += 1
        else:
            self._stats["batches"] += 1

    async def drain(self) -> None:
        """Wait for in-flight sends to finish."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)

    @property
    def stats(self) -> dict:
        return {
            **self._stats,
            "in_flight": len(self._pending),
        }


def sink_listener(sink: EventSink) -> Callable[[list[Event]], None]:
    """Wrap a sink as a provider listener."""
    return SinkListener(sink)
