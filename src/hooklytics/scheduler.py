"""Dual-timer dispatch: periodic queue flush and periodic heartbeat."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .config import Config
from .environment import (
    SnapshotProvider,
    VisibilityOracle,
    always_visible,
    environment_snapshot,
)
from .events import HEARTBEAT_EVENT_TYPE, Event, HookType, build_event
from .listeners import ListenerRegistry
from .queue import FastQueue
from .timers import TimerFactory, TimerHandle


logger = logging.getLogger(__name__)


@dataclass
class DispatchScheduler:
    """
    Drives delivery from the queue to the registered listener.

    While active, two independent timers run:
    - flush: every batch_interval_ms, drain the queue and deliver the
      batch if it is non-empty
    - heartbeat: every metadata_interval_ms, build a metadata_heartbeat
      event and deliver it on its own, bypassing the queue

    Each start bumps a generation counter that the tick closures check,
    so a tick queued before stop() is a no-op once teardown has begun.
    A failing listener is logged and counted; later ticks still run.
    """
    queue: FastQueue
    listeners: ListenerRegistry
    timers: TimerFactory
    snapshot_provider: SnapshotProvider = environment_snapshot
    visibility_oracle: VisibilityOracle = always_visible

    # Internal state
    _config: Config | None = field(default=None, init=False)
    _active: bool = field(default=False, init=False)
    _generation: int = field(default=0, init=False)
    _flush_timer: TimerHandle | None = field(default=None, init=False)
    _heartbeat_timer: TimerHandle | None = field(default=None, init=False)
    _stats: dict = field(default_factory=dict, init=False)

    def __post_init__(self):
        self._stats = {
            "batches_sent": 0,
            "events_sent": 0,
            "events_discarded": 0,
            "heartbeats_sent": 0,
            "heartbeats_skipped": 0,
            "listener_errors": 0,
        }

    @property
    def active(self) -> bool:
        return self._active

    @property
    def config(self) -> Config | None:
        return self._config

    def start(self, config: Config) -> None:
        """Activate with the given config (reconfigures if already active)."""
        if self._active:
            self.reconfigure(config)
            return

        self._config = config
        self._active = True
        self._start_timers()
        logger.info(
            f"Dispatch scheduler started (batch={config.batch_interval_ms}ms, "
            f"heartbeat={config.metadata_interval_ms}ms)"
        )

    def stop(self) -> None:
        """Cancel both timers. Safe to call repeatedly; queued events stay queued."""
        if not self._active:
            return

        self._active = False
        self._cancel_timers()
        logger.info(
            f"Dispatch scheduler stopped ({self.queue.queue_length()} events pending). "
            f"Stats: {self._stats}"
        )

    def reconfigure(self, config: Config) -> None:
        """
        Swap in a new config.

        Changes to the intervals, heartbeat gating or environment restart
        both timers together; anything else only replaces the snapshot.
        """
        previous = self._config
        self._config = config

        if not self._active:
            return

        if previous is None or previous.restart_required(config):
            self._cancel_timers()
            self._start_timers()
            logger.info(
                f"Dispatch scheduler restarted (batch={config.batch_interval_ms}ms, "
                f"heartbeat={config.metadata_interval_ms}ms)"
            )

    def flush_now(self) -> int:
        """
        Drain the queue and deliver it as one batch.

        Returns the number of events drained. Without a listener the
        drained events are discarded.
        """
        batch = self.queue.flush_queue()
        if not batch:
            return 0

        if not self.listeners.has_listener():
            logger.warning(f"No listener registered, discarding {len(batch)} events")
            self._stats["events_discarded"] += len(batch)
            return len(batch)

        if self._deliver(batch):
            self._stats["batches_sent"] += 1
            self._stats["events_sent"] += len(batch)
        return len(batch)

    def send_heartbeat(self) -> Event | None:
        """Build and deliver one heartbeat if the gates allow it."""
        config = self._config
        if config is None or not self.listeners.has_listener():
            return None

        if not config.send_metadata:
            return None

        if config.send_metadata_only_when_visible and not self.visibility_oracle():
            self._stats["heartbeats_skipped"] += 1
            if config.is_dev:
                logger.info("Surface hidden, skipping metadata heartbeat")
            return None

        event = build_event(
            HEARTBEAT_EVENT_TYPE,
            metadata=self.snapshot_provider(),
            config=config,
            hook_type=HookType.HEARTBEAT,
            clock=self.timers.now_ms,
        )

        if config.is_dev:
            logger.info(f"Sending core metadata: {event.to_dict()}")

        if self._deliver([event]):
            self._stats["heartbeats_sent"] += 1
        return event

    def _deliver(self, batch: list[Event]) -> bool:
        try:
            return self.listeners.notify(batch)
        except Exception:
            logger.exception(f"Listener failed on batch of {len(batch)} events")
            self._stats["listener_errors"] += 1
            return False

    def _start_timers(self) -> None:
        config = self._config
        self._generation += 1
        generation = self._generation

        def on_flush() -> None:
            if generation == self._generation:
                self.flush_now()

        def on_heartbeat() -> None:
            if generation == self._generation:
                self.send_heartbeat()

        self._flush_timer = self.timers.call_every(config.batch_interval_ms, on_flush, name="flush")
        self._heartbeat_timer = self.timers.call_every(
            config.metadata_interval_ms, on_heartbeat, name="heartbeat"
        )

    def _cancel_timers(self) -> None:
        # Invalidate outstanding ticks before touching the handles
        self._generation += 1
        for timer in (self._flush_timer, self._heartbeat_timer):
            if timer is not None:
                timer.cancel()
        self._flush_timer = None
        self._heartbeat_timer = None

    @property
    def stats(self) -> dict:
        """Get scheduler statistics."""
        return {
            **self._stats,
            "active": self._active,
            "queue_length": self.queue.queue_length(),
            "has_listener": self.listeners.has_listener(),
        }
