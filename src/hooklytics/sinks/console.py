"""Console sink for development/debugging."""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from datetime import datetime, timezone

from ..events import Event
from .base import EventSink


@dataclass
class ConsoleSink(EventSink):
    """
    Sink that prints events to stdout or stderr.

    Formats:
    - json: one JSON object per line
    - compact: "<iso time> <type> <element id> <metadata keys>"
    - pretty: indented JSON
    """
    stream: str = "stdout"  # stdout | stderr
    format: str = "json"  # json | compact | pretty
    prefix: str = "[HOOKLYTICS] "

    async def send(self, events: list[Event]) -> None:
        out = sys.stdout if self.stream == "stdout" else sys.stderr

        for event in events:
            print(f"{self.prefix}{self._format_event(event)}", file=out)

    def _format_event(self, event: Event) -> str:
        if self.format == "compact":
            when = datetime.fromtimestamp(event.timestamp / 1000, tz=timezone.utc)
            keys = ",".join(sorted(event.metadata)) or "-"
            return f"{when.isoformat()} {event.type} {event.element.element_id or '-'} {keys}"
        if self.format == "pretty":
            return json.dumps(event.to_dict(), indent=2, default=str)
        return json.dumps(event.to_dict(), default=str)
