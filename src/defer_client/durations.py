"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Duration parsing and resolution of relative times into absolute instants.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta

from .errors import InvalidDurationError
from .types import TimeValue

_MS_PER_SECOND = 1000.0
_MS_PER_MINUTE = 60 * _MS_PER_SECOND
_MS_PER_HOUR = 60 * _MS_PER_MINUTE
_MS_PER_DAY = 24 * _MS_PER_HOUR
_MS_PER_YEAR = 365.25 * _MS_PER_DAY

_UNIT_MS: dict[str, float] = {
    "ns": 1e-6,
    "nanosecond": 1e-6,
    "us": 1e-3,
    "µs": 1e-3,
    "microsecond": 1e-3,
    "ms": 1.0,
    "millisecond": 1.0,
    "s": _MS_PER_SECOND,
    "sec": _MS_PER_SECOND,
    "second": _MS_PER_SECOND,
    "m": _MS_PER_MINUTE,
    "min": _MS_PER_MINUTE,
    "minute": _MS_PER_MINUTE,
    "h": _MS_PER_HOUR,
    "hr": _MS_PER_HOUR,
    "hour": _MS_PER_HOUR,
    "d": _MS_PER_DAY,
    "day": _MS_PER_DAY,
    "w": 7 * _MS_PER_DAY,
    "wk": 7 * _MS_PER_DAY,
    "week": 7 * _MS_PER_DAY,
    "b": _MS_PER_YEAR / 12,
    "month": _MS_PER_YEAR / 12,
    "y": _MS_PER_YEAR,
    "yr": _MS_PER_YEAR,
    "year": _MS_PER_YEAR,
}

_GROUP_RE = re.compile(r"\s*(\d+(?:\.\d+)?|\.\d+)\s*([a-zµ]*)\s*,?", re.IGNORECASE)


def _unit_factor(unit: str) -> float | None:
    key = unit.lower()
    if not key:
        return 1.0
    factor = _UNIT_MS.get(key)
    if factor is None and key.endswith("s"):
        factor = _UNIT_MS.get(key[:-1])
    return factor


def parse_duration(text: str) -> float:
    """
    Parse a human duration such as ``"1h30m"`` or ``"10 minutes"``.

    Groups of ``<number><unit>`` are summed. A number without unit counts
    as milliseconds.

    Returns:
        The duration in milliseconds.

    Raises:
        InvalidDurationError: When the text is empty or cannot be parsed.
    """
    if not isinstance(text, str) or not text.strip():
        raise InvalidDurationError(f"invalid duration: {text!r}")

    total = 0.0
    pos = 0
    value = text.strip()
    while pos < len(value):
        match = _GROUP_RE.match(value, pos)
        if match is None or match.end() == pos:
            raise InvalidDurationError(f"invalid duration: {text!r}")
        factor = _unit_factor(match.group(2))
        if factor is None:
            raise InvalidDurationError(
                f"invalid duration: unknown unit {match.group(2)!r} in {text!r}"
            )
        total += float(match.group(1)) * factor
        pos = match.end()
    return total


def resolve_instant(value: TimeValue, now: datetime) -> datetime:
    """
    Resolve a relative duration or absolute instant against ``now``.

    Absolute ``datetime`` values are returned unchanged; strings are parsed
    with ``parse_duration`` and ``timedelta`` values are added as-is.
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, timedelta):
        return now + value
    if isinstance(value, str):
        return now + timedelta(milliseconds=parse_duration(value))
    raise InvalidDurationError(
        f"expected a duration string, timedelta or datetime, got {type(value).__name__}"
    )
