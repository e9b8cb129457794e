"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Normalization of the retry option shapes accepted by ``defer``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TypeAlias, TypedDict

from .constants import RETRY_MAX_ATTEMPTS_PLACEHOLDER
from .errors import InvalidConfigurationError
from .types import RetryPolicy


class RetryOptions(TypedDict, total=False):
    """Partial retry policy; missing fields keep their defaults."""

    max_attempts: int
    initial_interval: float
    randomization_factor: float
    multiplier: float
    max_interval: float


RetryConfig: TypeAlias = bool | int | RetryOptions | None

_RETRY_FIELDS = frozenset(RetryOptions.__annotations__)


def resolve_retry_policy(retry: RetryConfig = None) -> RetryPolicy:
    """
    Resolve one retry option value into a complete ``RetryPolicy``.

    Accepted shapes:
    - ``None`` / ``False``: no retry.
    - ``True``: retry with the platform default attempt count.
    - ``int``: explicit attempt count (``0`` disables retry).
    - mapping: partial policy; a missing or zero ``max_attempts`` falls back
      to the platform default attempt count.

    Raises:
        InvalidConfigurationError: For any other shape or invalid value.
    """
    # bool must be checked before int.
    if retry is None or retry is False:
        return RetryPolicy(max_attempts=0)
    if retry is True:
        return RetryPolicy(max_attempts=RETRY_MAX_ATTEMPTS_PLACEHOLDER)
    if isinstance(retry, int):
        if retry < 0:
            raise InvalidConfigurationError(
                f"retry attempts must be >= 0, got {retry}"
            )
        return RetryPolicy(max_attempts=retry)
    if isinstance(retry, Mapping):
        return _policy_from_mapping(retry)
    raise InvalidConfigurationError(
        f"invalid retry options: unsupported type {type(retry).__name__}"
    )


def _policy_from_mapping(options: Mapping[str, object]) -> RetryPolicy:
    unknown = set(options) - _RETRY_FIELDS
    if unknown:
        raise InvalidConfigurationError(
            f"invalid retry options: unknown field(s) {', '.join(sorted(unknown))}"
        )

    overrides: dict[str, float | int] = {}
    for name, value in options.items():
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise InvalidConfigurationError(
                f"invalid retry options: '{name}' must be a number"
            )
        if value < 0:
            raise InvalidConfigurationError(
                f"invalid retry options: '{name}' must be >= 0"
            )
        overrides[name] = value

    max_attempts = overrides.get("max_attempts")
    if not max_attempts:
        overrides["max_attempts"] = RETRY_MAX_ATTEMPTS_PLACEHOLDER
    elif not isinstance(max_attempts, int):
        raise InvalidConfigurationError(
            "invalid retry options: 'max_attempts' must be an integer"
        )
    return RetryPolicy(**overrides)  # type: ignore[arg-type]
