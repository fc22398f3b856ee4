"""Prometheus duration strings — ``30s``, ``5m``, ``1h30m``."""

from __future__ import annotations

import math
import re
from typing import Union

_UNITS = [
    ("y", 365 * 24 * 3600),
    ("w", 7 * 24 * 3600),
    ("d", 24 * 3600),
    ("h", 3600),
    ("m", 60),
    ("s", 1),
]
_UNIT_SECONDS = dict(_UNITS)

_DURATION_RE = re.compile(r"^(?:\d+(?:y|w|d|h|m|s))+$")
_PART_RE = re.compile(r"(\d+)(y|w|d|h|m|s)")


def parse_duration(value: Union[str, int, float]) -> int:
    """Return *value* as whole seconds.

    Accepts a Prometheus duration string or a positive number of seconds.
    Raises ValueError on anything else.
    """
    if isinstance(value, bool):
        raise ValueError(f"not a duration: {value!r}")
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError(f"duration must be finite: {value!r}")
    if isinstance(value, (int, float)):
        if value <= 0 or value != int(value):
            raise ValueError(f"duration must be a positive whole number of seconds: {value!r}")
        return int(value)
    if not isinstance(value, str):
        raise ValueError(f"not a duration: {value!r}")
    text = value.strip()
    if text.isdigit():
        return parse_duration(int(text))
    if not _DURATION_RE.match(text):
        raise ValueError(f"not a duration: {value!r}")
    seconds = sum(int(n) * _UNIT_SECONDS[unit] for n, unit in _PART_RE.findall(text))
    if seconds <= 0:
        raise ValueError(f"duration must be positive: {value!r}")
    return seconds


def format_duration(seconds: int) -> str:
    """Render *seconds* in canonical form: ``90`` → ``1m30s``."""
    if seconds <= 0:
        raise ValueError(f"duration must be positive: {seconds!r}")
    parts = []
    remaining = seconds
    for unit, size in _UNITS:
        count, remaining = divmod(remaining, size)
        if count:
            parts.append(f"{count}{unit}")
    return "".join(parts)
