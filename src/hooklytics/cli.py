#!/usr/bin/env python3
"""
Command line entry point for hooklytics.

Usage:
    hooklytics config                          # print resolved config
    hooklytics config --config hooklytics.yaml
    hooklytics demo --seconds 6 --events 20    # run a provider with a console sink
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import random
import sys
from pathlib import Path
from typing import Any

from .config import Config, config_overrides_from_env, resolve_config
from .provider import AnalyticsProvider
from .sinks import ConsoleSink, sink_listener
from .tracking import DurationTracker


logger = logging.getLogger(__name__)

DEMO_EVENT_TYPES = [
    "cta_button_click",
    "nav_link_click",
    "checkout_step_completed",
    "search_submitted",
]


def load_overrides(path: str | None) -> dict[str, Any]:
    """Read overrides from a YAML/JSON file, then layer HOOKLYTICS_* variables on top."""
    overrides: dict[str, Any] = {}
    if path:
        suffix = Path(path).suffix.lower()
        file_config = Config.from_json(path) if suffix == ".json" else Config.from_yaml(path)
        overrides.update(file_config.to_dict())
    overrides.update(config_overrides_from_env())
    return overrides


def cmd_config(args: argparse.Namespace) -> int:
    config = resolve_config(load_overrides(args.config))
    print(json.dumps(config.to_dict(), indent=2, default=str))
    return 0


async def run_demo(overrides: dict[str, Any], seconds: float, events: int, format: str) -> dict:
    """Mount a provider on asyncio timers and feed it synthetic events."""
    provider = AnalyticsProvider(config=overrides)
    listener = sink_listener(ConsoleSink(format=format))

    async with provider:
        provider.set_listener(listener)
        delay = seconds / max(events, 1)

        with DurationTracker(provider, "demo_session", metadata={"source": "cli"}):
            for i in range(events):
                provider.track(
                    random.choice(DEMO_EVENT_TYPES),
                    {"sequence": i, "value": round(random.random() * 100, 2)},
                )
                await asyncio.sleep(delay)

        provider.flush()
        await listener.drain()
        stats = provider.stats

    return stats


def cmd_demo(args: argparse.Namespace) -> int:
    overrides = load_overrides(args.config)
    stats = asyncio.run(run_demo(overrides, args.seconds, args.events, args.format))
    logger.info(f"Demo finished. Stats: {stats}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="hooklytics", description="Interaction event buffering")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    config_parser = sub.add_parser("config", help="Print the resolved configuration")
    config_parser.add_argument("--config", "-c", help="YAML or JSON config file")
    config_parser.set_defaults(func=cmd_config)

    demo_parser = sub.add_parser("demo", help="Run a provider with synthetic events")
    demo_parser.add_argument("--config", "-c", help="YAML or JSON config file")
    demo_parser.add_argument("--seconds", type=float, default=6.0, help="How long to produce events")
    demo_parser.add_argument("--events", type=int, default=20, help="Number of events to produce")
    demo_parser.add_argument(
        "--format",
        choices=["json", "compact", "pretty"],
        default="compact",
        help="Console output format",
    )
    demo_parser.set_defaults(func=cmd_demo)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
