"""HTTP collector sink."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

import httpx

from ..errors import SinkDeliveryError
from ..events import Event
from .base import EventSink


logger = logging.getLogger(__name__)


@dataclass
class HttpSink(EventSink):
    """
    Posts each batch as a JSON array to a collector endpoint.

    Events are sent in the collector's event_log record shape (see
    Event.to_wire). Non-2xx responses raise SinkDeliveryError; there is
    no retry.

    Config:
        endpoint: Collector URL (default: $HOOKLYTICS_ENDPOINT)
        website_id: Site identifier stamped on every record
        api_token: Bearer token for the collector, if it requires one
        timeout: Request timeout in seconds
    """
    endpoint: str = field(
        default_factory=lambda: os.environ.get("HOOKLYTICS_ENDPOINT", "http://localhost:5555/events")
    )
    website_id: str | None = field(
        default_factory=lambda: os.environ.get("HOOKLYTICS_WEBSITE_ID")
    )
    api_token: str | None = field(
        default_factory=lambda: os.environ.get("HOOKLYTICS_API_TOKEN"), repr=False
    )
    timeout: float = 5.0

    # Injected in tests (httpx.MockTransport)
    transport: httpx.AsyncBaseTransport | None = field(default=None, repr=False)

    _client: httpx.AsyncClient | None = field(default=None, init=False, repr=False)

    async def start(self) -> None:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers=self._get_headers(),
                transport=self.transport,
            )

    async def stop(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def send(self, events: list[Event]) -> None:
        if self._client is None:
            await self.start()

        payload = [event.to_wire(self.website_id) for event in events]
        try:
            response = await self._client.post(self.endpoint, json=payload)
        except httpx.HTTPError as e:
            raise SinkDeliveryError(f"Collector unreachable at {self.endpoint}: {e}") from e

        if not response.is_success:
            raise SinkDeliveryError(
                f"Collector rejected batch of {len(events)}: {response.status_code} {response.text}",
                status_code=response.status_code,
            )
        logger.debug(f"Posted {len(events)} events to {self.endpoint}")

    async def health_check(self) -> bool:
        return self._client is not None and not self._client.is_closed

    def _get_headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_token:
            headers["Authorization"] = f"Bearer {self.api_token}"
        if self.website_id:
            headers["X-Website-ID"] = self.website_id
        return headers
