"""Default environment collaborators.

A browser host would report page title, URL and viewport here. A Python
host has no page, so the defaults describe the running process instead:
locale, script path, argv, terminal size, interpreter and platform. Hosts
that do have a page (a desktop app, a notebook, a web view bridge) pass
their own snapshot provider and visibility oracle to the provider.
"""

from __future__ import annotations

import locale
import os
import platform
import shutil
import sys
import time
from typing import Any, Callable

SnapshotProvider = Callable[[], dict[str, Any]]
VisibilityOracle = Callable[[], bool]

SNAPSHOT_KEYS = (
    "language",
    "page_title",
    "pathname",
    "querystring",
    "referrer",
    "screen_height",
    "screen_width",
    "user_agent",
    "timezone",
    "url",
)


def _language() -> str:
    lang, _ = locale.getlocale()
    if lang:
        return lang.replace("_", "-")
    return os.environ.get("LANG", "").split(".")[0].replace("_", "-")


def _timezone() -> str:
    tz = os.environ.get("TZ")
    if tz:
        return tz
    return time.tzname[time.localtime().tm_isdst > 0]


def _user_agent() -> str:
    return (
        f"{platform.python_implementation()}/{platform.python_version()} "
        f"({platform.system()} {platform.release()}; {platform.machine()})"
    )


def environment_snapshot() -> dict[str, Any]:
    """Snapshot of the host process, keyed like a browser page snapshot."""
    size = shutil.get_terminal_size()
    script = sys.argv[0] if sys.argv and sys.argv[0] else ""
    pathname = os.path.abspath(script) if script else os.getcwd()

    return {
        "language": _language(),
        "page_title": os.path.basename(script) or platform.node(),
        "pathname": pathname,
        "querystring": " ".join(sys.argv[1:]),
        "referrer": "",
        "screen_height": size.lines,
        "screen_width": size.columns,
        "user_agent": _user_agent(),
        "timezone": _timezone(),
        "url": f"file://{pathname}",
    }


def always_visible() -> bool:
    """Visibility oracle for hosts without a notion of hidden surfaces."""
    return True
