"""Event envelope and builder."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Mapping

from .config import Config
from .elements import ElementInfo, ElementPathResolver, resolve_element_path
from .errors import InvalidEventError


logger = logging.getLogger(__name__)

HEARTBEAT_EVENT_TYPE = "metadata_heartbeat"

Clock = Callable[[], int]


def now_ms() -> int:
    """Wall-clock milliseconds since the epoch."""
    return time.time_ns() // 1_000_000


class HookType(str, Enum):
    """Producer family that created an event."""
    TRACK_EVENT = "track_event"
    TRACK_ELEMENT_EVENT = "track_element_event"
    TRACK_DURATION = "track_duration"
    TRACK_CLICKS = "track_clicks"
    TRACK_VISIBILITY = "track_visibility"
    HEARTBEAT = "heartbeat"


@dataclass(frozen=True, slots=True)
class EventOptions:
    """Per-call options for building an event."""
    include_element_path: bool = False
    element_id: str | None = None

    # Stamp the end of an interval instead of build time
    custom_timestamp: int | None = None


@dataclass(frozen=True, slots=True)
class Event:
    """
    A single interaction event.

    Built by build_event(), queued by reference and delivered to the
    listener in batches. Never mutated after construction.
    """
    type: str
    timestamp: int
    metadata: dict[str, Any] = field(default_factory=dict)
    default_metadata: dict[str, Any] = field(default_factory=dict)
    element: ElementInfo = field(default_factory=ElementInfo)
    hook_type: HookType = HookType.TRACK_EVENT

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "type": self.type,
            "hook_type": self.hook_type.value,
            "timestamp": self.timestamp,
            "metadata": self.metadata,
            "default_metadata": self.default_metadata,
            "element": self.element.to_dict(),
        }

    def to_wire(self, website_id: str | None = None) -> dict[str, Any]:
        """Record shape expected by the collector's event_log ingest."""
        return {
            "website_id": website_id,
            "hook_type": self.hook_type.value,
            "event_type": self.type,
            "default_metadata": self.default_metadata,
            "core_metadata": self.metadata,
            "element_metadata": self.element.to_dict(),
            "timestamp": self.timestamp,
        }


def build_event(
    type: str,
    metadata: Mapping[str, Any] | None = None,
    options: EventOptions | None = None,
    element: Any = None,
    config: Config | None = None,
    hook_type: HookType = HookType.TRACK_EVENT,
    path_resolver: ElementPathResolver = resolve_element_path,
    clock: Clock = now_ms,
) -> Event:
    """
    Normalize producer input into an Event.

    Metadata is shallow-copied so later caller mutation cannot reach a
    queued event. default_metadata comes from the already resolved
    config; the environment is not re-read here.

    Raises:
        InvalidEventError: If type is empty or not a string
    """
    if not isinstance(type, str) or not type:
        raise InvalidEventError(f"event type must be a non-empty string, got {type!r}")

    options = options or EventOptions()
    timestamp = options.custom_timestamp if options.custom_timestamp is not None else clock()

    if element is not None:
        path = path_resolver(element) if options.include_element_path else None
        element_info = ElementInfo.bind(element, options.element_id, path)
    else:
        element_info = ElementInfo()

    event = Event(
        type=type,
        timestamp=timestamp,
        metadata=dict(metadata or {}),
        default_metadata=dict(config.default_metadata) if config else {},
        element=element_info,
        hook_type=hook_type,
    )

    if config is not None and config.debug:
        logger.info(f"Built event: {event.to_dict()}")

    return event
