"""
Hooklytics - client-side interaction event buffering.

Producers queue interaction events; a provider flushes them in batches to
one registered listener on a fixed period and emits periodic environment
heartbeats alongside.
"""

from .config import Config, Environment, config_overrides_from_env, resolve_config
from .elements import ElementInfo, resolve_element_path
from .errors import (
    HooklyticsError,
    InvalidEventError,
    ProviderNotActiveError,
    SinkDeliveryError,
)
from .events import HEARTBEAT_EVENT_TYPE, Event, EventOptions, HookType, build_event
from .listeners import ListenerRegistry
from .provider import AnalyticsProvider, get_analytics_context
from .queue import FastQueue
from .scheduler import DispatchScheduler
from .timers import AsyncioTimers, VirtualTimers
from .tracking import DurationTracker, track_event

__version__ = "0.1.0"

__all__ = [
    "AnalyticsProvider",
    "AsyncioTimers",
    "Config",
    "DispatchScheduler",
    "DurationTracker",
    "ElementInfo",
    "Environment",
    "Event",
    "EventOptions",
    "FastQueue",
    "HEARTBEAT_EVENT_TYPE",
    "HookType",
    "HooklyticsError",
    "InvalidEventError",
    "ListenerRegistry",
    "ProviderNotActiveError",
    "SinkDeliveryError",
    "VirtualTimers",
    "build_event",
    "config_overrides_from_env",
    "get_analytics_context",
    "resolve_config",
    "resolve_element_path",
    "track_event",
]
