"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Serialization and identifier helpers.
"""

from __future__ import annotations

import json
import uuid
from collections.abc import Sequence
from typing import Any

from .errors import SerializationError
from .types import JSONValue


def json_roundtrip(value: Any) -> JSONValue:
    """
    Force ``value`` through JSON encoding and decoding.

    The returned value is a deep copy made only of JSON types, i.e. exactly
    what a remote backend would store.

    Raises:
        SerializationError: When ``value`` is not JSON-serializable.
    """
    try:
        encoded = json.dumps(value, allow_nan=False)
    except (TypeError, ValueError) as e:
        raise SerializationError(str(e)) from e
    return json.loads(encoded)


def sanitize_function_arguments(args: Sequence[Any]) -> list[JSONValue]:
    """Return a detached, JSON-safe copy of positional call arguments."""
    try:
        sanitized = json_roundtrip(list(args))
    except SerializationError as e:
        raise SerializationError(f"cannot serialize argument: {e}") from e
    assert isinstance(sanitized, list)
    return sanitized


def new_execution_id() -> str:
    """Return a fresh, unguessable execution identifier."""
    return str(uuid.uuid4())
