"""Exception types for hooklytics."""

from __future__ import annotations


class HooklyticsError(Exception):
    """Base class for hooklytics errors."""


class ProviderNotActiveError(HooklyticsError, RuntimeError):
    """Raised when a consumer-side API is used without a mounted provider."""

    def __init__(self, operation: str):
        super().__init__(
            f"{operation} must be called while an AnalyticsProvider is mounted"
        )
        self.operation = operation


class InvalidEventError(HooklyticsError, ValueError):
    """Raised when a producer builds an event without a usable type."""


class SinkDeliveryError(HooklyticsError):
    """Raised by a sink when the downstream transport rejects a batch."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
