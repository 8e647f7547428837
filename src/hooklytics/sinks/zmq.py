"""ZeroMQ sink for streaming batches to a collector."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any

from ..events import Event
from .base import EventSink


logger = logging.getLogger(__name__)


@dataclass
class ZmqSink(EventSink):
    """
    Publishes each batch as one two-frame message: [topic, JSON array].

    Requires the optional pyzmq dependency (pip install hooklytics[zmq]).

    Config:
        endpoint: ZMQ endpoint (e.g., "tcp://*:5556")
        topic: Topic frame for subscribers to filter on
        socket_type: pub | push
        bind: Bind the endpoint (True) or connect to it (False)
        high_water_mark: Max queued messages before ZMQ drops
    """
    endpoint: str = "tcp://*:5556"
    topic: str = "hooklytics"
    socket_type: str = "pub"  # pub | push
    bind: bool = True
    high_water_mark: int = 10000

    _context: Any = field(default=None, init=False)
    _socket: Any = field(default=None, init=False)

    async def start(self) -> None:
        try:
            import zmq
            import zmq.asyncio
        except ImportError:
            raise RuntimeError("pyzmq required: pip install hooklytics[zmq]")

        self._context = zmq.asyncio.Context()
        kind = zmq.PUB if self.socket_type == "pub" else zmq.PUSH
        self._socket = self._context.socket(kind)
        self._socket.set_hwm(self.high_water_mark)

        if self.bind:
            self._socket.bind(self.endpoint)
        else:
            self._socket.connect(self.endpoint)

        logger.info(f"ZMQ sink started on {self.endpoint} ({self.socket_type})")

    async def stop(self) -> None:
        if self._socket:
            self._socket.close()
            self._socket = None
        if self._context:
            self._context.term()
            self._context = None

        logger.info("ZMQ sink stopped")

    async def send(self, events: list[Event]) -> None:
        if not self._socket:
            logger.warning(f"ZMQ sink not started, dropping {len(events)} events")
            return

        body = json.dumps([event.to_dict() for event in events], default=str)
        await self._socket.send_multipart([self.topic.encode(), body.encode()])

    async def health_check(self) -> bool:
        return self._socket is not None
