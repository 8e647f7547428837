"""JSONL file sink."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO

from ..events import Event
from .base import EventSink


@dataclass
class FileSink(EventSink):
    """
    Appends events to a file, one JSON object per line.

    The file is opened lazily on the first batch if start() was not
    called.
    """
    path: str
    encoding: str = "utf-8"

    _file: IO[str] | None = field(default=None, init=False)
    _written: int = field(default=0, init=False)

    async def start(self) -> None:
        Path(self.path).parent.mkdir(parents=True, exist_ok=True)
        self._file = open(self.path, "a", encoding=self.encoding)

    async def stop(self) -> None:
        if self._file:
            self._file.close()
            self._file = None

    async def send(self, events: list[Event]) -> None:
        if self._file is None:
            await self.start()

        self._file.writelines(json.dumps(event.to_dict(), default=str) + "\n" for event in events)
        self._file.flush()
        self._written += len(events)

    async def health_check(self) -> bool:
        return self._file is not None and not self._file.closed

    @property
    def events_written(self) -> int:
        return self._written
