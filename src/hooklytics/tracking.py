"""Producer helpers for queueing events."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, Mapping

from .events import Event, EventOptions, HookType

if TYPE_CHECKING:
    from .provider import AnalyticsProvider


logger = logging.getLogger(__name__)


def track_event(
    provider: AnalyticsProvider,
    type: str,
    metadata: Mapping[str, Any] | None = None,
    element: Any = None,
    options: EventOptions | None = None,
) -> Event:
    """Build an event with the provider's config and queue it."""
    hook_type = HookType.TRACK_ELEMENT_EVENT if element is not None else HookType.TRACK_EVENT
    return provider.track(type, metadata, element=element, options=options, hook_type=hook_type)


@dataclass
class DurationTracker:
    """
    Measures how long something lasted and queues one event at the end.

    The event carries entered_at, left_at and duration (all ms) in its
    metadata and is stamped with the end time, not the build time.

    Usage:
        tracker = DurationTracker(provider, "pricing_section_view")
        tracker.start()
        ...
        tracker.end()

    or as a context manager:
        with DurationTracker(provider, "report_render"):
            render()
    """
    provider: AnalyticsProvider
    type: str
    metadata: Mapping[str, Any] | None = None
    element: Any = None
    options: EventOptions | None = None

    _started_at: int | None = field(default=None, init=False)

    @property
    def tracking(self) -> bool:
        return self._started_at is not None

    def start(self) -> None:
        """Begin timing. Ignored if already running."""
        if self._started_at is None:
            self._started_at = self.provider.timers.now_ms()

    def end(self) -> Event | None:
        """Stop timing and queue the duration event. No-op if not started."""
        if self._started_at is None:
            return None

        started_at = self._started_at
        ended_at = self.provider.timers.now_ms()
        self._started_at = None

        metadata = {
            **(self.metadata or {}),
            "entered_at": started_at,
            "left_at": ended_at,
            "duration": ended_at - started_at,
        }
        options = replace(self.options or EventOptions(), custom_timestamp=ended_at)

        event = self.provider.track(
            self.type,
            metadata,
            element=self.element,
            options=options,
            hook_type=HookType.TRACK_DURATION,
        )
        logger.debug(f"Tracked {self.type} duration: {ended_at - started_at}ms")
        return event

    def __enter__(self) -> DurationTracker:
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.end()
