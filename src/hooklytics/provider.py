"""Analytics provider: the context object owning queue, listener and timers."""

from __future__ import annotations

import contextvars
import logging
from typing import Any, Mapping

from .config import Config, resolve_config
from .elements import ElementPathResolver, resolve_element_path
from .environment import (
    SnapshotProvider,
    VisibilityOracle,
    always_visible,
    environment_snapshot,
)
from .errors import ProviderNotActiveError
from .events import Event, EventOptions, HookType, build_event
from .listeners import Listener, ListenerRegistry
from .queue import FastQueue
from .scheduler import DispatchScheduler
from .timers import AsyncioTimers, TimerFactory


logger = logging.getLogger(__name__)

_active_provider: contextvars.ContextVar[AnalyticsProvider | None] = contextvars.ContextVar(
    "hooklytics_active_provider", default=None
)


class AnalyticsProvider:
    """
    One analytics activation: config, queue, listener slot and scheduler.

    Producers may enqueue at any time, including while unmounted; those
    events wait in the queue until the next flush after mounting.
    Consumer-side calls (set_listener, flush, config) require a mount
    and raise ProviderNotActiveError otherwise.

    Usage:
        provider = AnalyticsProvider(config={"batch_interval_ms": 2000})
        async with provider:
            provider.set_listener(send_batch)
            provider.track("cta_click", {"button": "signup"})
    """

    def __init__(
        self,
        config: Mapping[str, Any] | Config | None = None,
        timers: TimerFactory | None = None,
        snapshot_provider: SnapshotProvider = environment_snapshot,
        visibility_oracle: VisibilityOracle = always_visible,
        path_resolver: ElementPathResolver = resolve_element_path,
        max_queue_size: int | None = None,
    ):
        self._overrides = config
        self.timers = timers or AsyncioTimers()
        self.snapshot_provider = snapshot_provider
        self.path_resolver = path_resolver

        self._base_max_queue_size = max_queue_size
        self.queue = FastQueue(max_size=max_queue_size)
        self.listeners = ListenerRegistry()
        self.scheduler = DispatchScheduler(
            queue=self.queue,
            listeners=self.listeners,
            timers=self.timers,
            snapshot_provider=snapshot_provider,
            visibility_oracle=visibility_oracle,
        )

        self._config: Config | None = None
        self._token: contextvars.Token | None = None

    # -- lifecycle -----------------------------------------------------------

    @property
    def mounted(self) -> bool:
        return self._config is not None

    def mount(self, config: Mapping[str, Any] | Config | None = None) -> Config:
        """Resolve config, start the timers and become the active context."""
        if config is not None:
            self._overrides = config
        if self.mounted:
            self.unmount()

        resolved = resolve_config(self._overrides, self.snapshot_provider)
        self._apply_queue_limits(resolved)
        self._config = resolved
        self.scheduler.start(resolved)
        self._token = _active_provider.set(self)

        if resolved.is_dev:
            logger.info("Analytics provider initialized")
        return resolved

    def unmount(self) -> None:
        """Stop the timers and empty the listener slot. Queued events are kept."""
        if not self.mounted:
            return

        self.scheduler.stop()
        self.listeners.set_listener(None)
        self._config = None

        if self._token is not None:
            try:
                _active_provider.reset(self._token)
            except ValueError:
                # Token was created in another context (e.g. a different task)
                if _active_provider.get() is self:
                    _active_provider.set(None)
            self._token = None

    start = mount
    stop = unmount

    def reconfigure(self, config: Mapping[str, Any] | Config) -> Config:
        """Re-resolve config while mounted and hand it to the scheduler."""
        self._require_mounted("reconfigure")
        self._overrides = config
        resolved = resolve_config(config, self.snapshot_provider)
        self._apply_queue_limits(resolved)
        self._config = resolved
        self.scheduler.reconfigure(resolved)
        return resolved

    def __enter__(self) -> AnalyticsProvider:
        self.mount()
        return self

    def __exit__(self, *exc_info) -> None:
        self.unmount()

    async def __aenter__(self) -> AnalyticsProvider:
        self.mount()
        return self

    async def __aexit__(self, *exc_info) -> None:
        self.unmount()

    # -- consumer side -------------------------------------------------------

    @property
    def config(self) -> Config:
        return self._require_mounted("config")

    def set_listener(self, fn: Listener | None) -> None:
        """Register the batch listener, replacing any previous one."""
        self._require_mounted("set_listener")
        self.listeners.set_listener(fn)

    def flush(self) -> int:
        """Deliver everything queued right now instead of waiting for a tick."""
        self._require_mounted("flush")
        return self.scheduler.flush_now()

    # -- producer side -------------------------------------------------------

    def enqueue(self, event: Event) -> None:
        self.queue.enqueue(event)

    def build(
        self,
        type: str,
        metadata: Mapping[str, Any] | None = None,
        element: Any = None,
        options: EventOptions | None = None,
        hook_type: HookType = HookType.TRACK_EVENT,
    ) -> Event:
        """Build an event against the current config without queueing it."""
        return build_event(
            type,
            metadata=metadata,
            options=options,
            element=element,
            config=self._config,
            hook_type=hook_type,
            path_resolver=self.path_resolver,
            clock=self.timers.now_ms,
        )

    def track(
        self,
        type: str,
        metadata: Mapping[str, Any] | None = None,
        element: Any = None,
        options: EventOptions | None = None,
        hook_type: HookType = HookType.TRACK_EVENT,
    ) -> Event:
        """Build an event and queue it."""
        event = self.build(type, metadata, element, options, hook_type)
        self.enqueue(event)
        return event

    @property
    def stats(self) -> dict:
        return {
            "mounted": self.mounted,
            "queue": self.queue.stats,
            "scheduler": self.scheduler.stats,
        }

    # -- internals -----------------------------------------------------------

    def _require_mounted(self, operation: str) -> Config:
        if self._config is None:
            raise ProviderNotActiveError(operation)
        return self._config

    def _apply_queue_limits(self, config: Config) -> None:
        if config.max_queue_size is not None:
            self.queue.max_size = config.max_queue_size
        else:
            self.queue.max_size = self._base_max_queue_size
        self.queue.overflow_policy = config.overflow_policy


def get_analytics_context() -> AnalyticsProvider:
    """
    Return the provider mounted in the current context.

    Raises:
        ProviderNotActiveError: If no provider is mounted
    """
    provider = _active_provider.get()
    if provider is None or not provider.mounted:
        raise ProviderNotActiveError("get_analytics_context")
    return provider
