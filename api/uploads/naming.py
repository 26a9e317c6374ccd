"""
Filename handling for stored uploads.
"""

from __future__ import annotations

import re
import time

_WHITESPACE_RUN = re.compile(r"\s+")


def sanitize_filename(name: str) -> str:
    """
    Keep only the last path segment and turn whitespace runs into "_".

    Both "/" and "\\" are treated as separators so Windows-style client paths
    cannot smuggle a directory in. No other characters are touched.
    """
    segment = (name or "").replace("\\", "/").rstrip("/").rsplit("/", 1)[-1]
    return _WHITESPACE_RUN.sub("_", segment)


def now_millis() -> int:
    return time.time_ns() // 1_000_000


def stored_filename(name: str, timestamp_ms: int | None = None) -> str:
    """
    `<epoch-millis>-<sanitized-name>`.

    Two uploads of the same sanitized name within one millisecond get the same
    stored name; the later write wins.
    """
    ts = now_millis() if timestamp_ms is None else timestamp_ms
    return f"{ts}-{sanitize_filename(name)}"
