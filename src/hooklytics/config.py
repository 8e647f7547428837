"""Configuration for the analytics provider."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields, asdict
from enum import Enum
from typing import Any, Mapping

from .environment import SnapshotProvider, environment_snapshot
from .queue import OVERFLOW_DROP_OLDEST


logger = logging.getLogger(__name__)


class Environment(str, Enum):
    """Deployment environment. DEV turns on diagnostic logging."""
    PROD = "prod"
    DEV = "dev"


# Changing any of these on a running scheduler restarts both timers
RESTART_FIELDS = (
    "batch_interval_ms",
    "metadata_interval_ms",
    "send_metadata",
    "send_metadata_only_when_visible",
    "environment",
)

# Keys accepted from the JavaScript-style config objects
_CAMEL_CASE_ALIASES = {
    "batchInterval": "batch_interval_ms",
    "metadataInterval": "metadata_interval_ms",
    "sendMetadata": "send_metadata",
    "sendMetadataOnlyWhenVisible": "send_metadata_only_when_visible",
    "defaultMetadata": "default_metadata",
    "maxQueueSize": "max_queue_size",
    "overflowPolicy": "overflow_policy",
}

_ENV_VARS = {
    "HOOKLYTICS_BATCH_INTERVAL_MS": ("batch_interval_ms", int),
    "HOOKLYTICS_METADATA_INTERVAL_MS": ("metadata_interval_ms", int),
    "HOOKLYTICS_SEND_METADATA": ("send_metadata", "bool"),
    "HOOKLYTICS_SEND_METADATA_ONLY_WHEN_VISIBLE": ("send_metadata_only_when_visible", "bool"),
    "HOOKLYTICS_ENVIRONMENT": ("environment", str),
    "HOOKLYTICS_DEBUG": ("debug", "bool"),
    "HOOKLYTICS_MAX_QUEUE_SIZE": ("max_queue_size", int),
}


@dataclass(frozen=True)
class Config:
    """
    Resolved provider configuration.

    Immutable for the lifetime of one provider mount; remounting
    resolves a fresh Config.
    """
    # Flush period for the event queue
    batch_interval_ms: int = 1000

    # Heartbeat period
    metadata_interval_ms: int = 5000

    # Heartbeat gating
    send_metadata: bool = True
    send_metadata_only_when_visible: bool = False

    environment: Environment = Environment.PROD

    # Log every built event
    debug: bool = False

    # Environment snapshot merged with caller overrides
    default_metadata: dict[str, Any] = field(default_factory=dict)

    # Optional queue ceiling (None = unbounded)
    max_queue_size: int | None = None
    overflow_policy: str = OVERFLOW_DROP_OLDEST

    @property
    def is_dev(self) -> bool:
        return self.environment == Environment.DEV

    def restart_required(self, other: Config) -> bool:
        """True if switching to `other` needs the timers restarted."""
        return any(getattr(self, name) != getattr(other, name) for name in RESTART_FIELDS)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        data = asdict(self)
        env = self.environment
        data["environment"] = env.value if isinstance(env, Environment) else env
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Config:
        """Create config from dictionary (no environment snapshot)."""
        return cls(**normalize_overrides(data))

    @classmethod
    def from_yaml(cls, path: str) -> Config:
        """Load config from YAML file."""
        import yaml
        with open(path, "r") as f:
            data = yaml.safe_load(f)
        return cls.from_dict(data or {})

    @classmethod
    def from_json(cls, path: str) -> Config:
        """Load config from JSON file."""
        import json
        with open(path, "r") as f:
            data = json.load(f)
        return cls.from_dict(data)


_FIELD_NAMES = {f.name for f in fields(Config)}


def normalize_overrides(data: Mapping[str, Any] | None) -> dict[str, Any]:
    """
    Map caller overrides onto Config field names.

    camelCase keys are translated, unknown keys are dropped with a
    warning. Values are not validated.
    """
    if not data:
        return {}

    result: dict[str, Any] = {}
    for key, value in data.items():
        name = _CAMEL_CASE_ALIASES.get(key, key)
        if name not in _FIELD_NAMES:
            logger.warning(f"Ignoring unknown config key: {key}")
            continue
        if name == "environment":
            value = _coerce_environment(value)
        result[name] = value
    return result


def _coerce_environment(value: Any) -> Any:
    try:
        return Environment(value)
    except ValueError:
        return value


def _parse_bool(raw: str) -> bool:
    return raw.strip().lower() in ("1", "true", "yes", "on")


def config_overrides_from_env(environ: Mapping[str, str] | None = None) -> dict[str, Any]:
    """Read HOOKLYTICS_* variables into an override mapping."""
    environ = os.environ if environ is None else environ

    overrides: dict[str, Any] = {}
    for var, (name, kind) in _ENV_VARS.items():
        raw = environ.get(var)
        if raw is None:
            continue
        if kind == "bool":
            overrides[name] = _parse_bool(raw)
            continue
        try:
            overrides[name] = kind(raw)
        except ValueError:
            logger.warning(f"Ignoring {var}={raw!r}: not a valid {kind.__name__}")
    return overrides


def resolve_config(
    overrides: Mapping[str, Any] | Config | None = None,
    snapshot_provider: SnapshotProvider = environment_snapshot,
) -> Config:
    """
    Merge caller overrides over the defaults.

    default_metadata is layered onto a fresh environment snapshot rather
    than replacing it; every other field is "override wins, else default".
    """
    if isinstance(overrides, Config):
        values = {f.name: getattr(overrides, f.name) for f in fields(Config)}
    else:
        values = normalize_overrides(overrides)

    default_metadata = dict(snapshot_provider())
    caller_metadata = values.pop("default_metadata", None)
    if caller_metadata:
        default_metadata.update(caller_metadata)

    return Config(default_metadata=default_metadata, **values)
