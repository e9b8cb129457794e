from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from defer_client import InvalidDurationError, parse_duration, resolve_instant

NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    ("text", "expected_ms"),
    [
        ("250ms", 250),
        ("10s", 10_000),
        ("10m", 600_000),
        ("1h30m", 5_400_000),
        ("1.5h", 5_400_000),
        ("10 minutes", 600_000),
        ("2 days", 172_800_000),
        ("1w", 604_800_000),
        ("1h, 15min", 4_500_000),
        ("1500", 1500),
    ],
)
def test_parse_duration_returns_milliseconds(text, expected_ms):
    assert parse_duration(text) == expected_ms


@pytest.mark.parametrize("text", ["", "   ", "soon", "10 parsecs", "h1"])
def test_parse_duration_rejects_garbage(text):
    with pytest.raises(InvalidDurationError):
        parse_duration(text)


def test_relative_duration_is_added_to_reference_instant():
    for text in ("10m", "1h30m", "3d", "250ms"):
        resolved = resolve_instant(text, NOW)
        assert resolved - NOW == timedelta(milliseconds=parse_duration(text))


def test_absolute_instant_is_returned_unchanged():
    when = datetime(2030, 5, 1, tzinfo=timezone.utc)
    assert resolve_instant(when, NOW) is when


def test_timedelta_is_relative_to_reference_instant():
    assert resolve_instant(timedelta(hours=2), NOW) == NOW + timedelta(hours=2)


def test_reference_instant_is_not_mutated():
    reference = NOW
    resolve_instant("5m", reference)
    assert reference == datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


def test_unsupported_time_value_is_rejected():
    with pytest.raises(InvalidDurationError):
        resolve_instant(42, NOW)  # type: ignore[arg-type]
