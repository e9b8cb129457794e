"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Data model for deferred functions and their executions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Annotated, Any, Literal, TypeAlias

from pydantic import Field

from .constants import CONCURRENCY_MAX, CONCURRENCY_MIN

JSONPrimitive: TypeAlias = str | int | float | bool | None
JSONValue: TypeAlias = JSONPrimitive | list["JSONValue"] | dict[str, "JSONValue"]

# Relative durations are strings such as "1h30m" or a ``timedelta``.
Duration: TypeAlias = str | timedelta
TimeValue: TypeAlias = Duration | datetime

Concurrency = Annotated[int, Field(ge=CONCURRENCY_MIN, le=CONCURRENCY_MAX)]

ExecutionState = Literal[
    "created", "started", "succeed", "failed", "cancelled", "aborted", "discarded"
]
LocalExecutionState = Literal["started", "succeed", "failed"]

TERMINAL_STATES: frozenset[str] = frozenset(
    {"succeed", "failed", "cancelled", "aborted", "discarded"}
)


def is_terminal_state(state: str) -> bool:
    """Whether ``state`` is a final state; unknown states are still in progress."""
    return state in TERMINAL_STATES


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """
    Retry schedule applied by the backend to a failed execution.

    Attributes:
        max_attempts: Retries after the first attempt (``0`` disables retry).
        initial_interval: Seconds before the first retry.
        randomization_factor: Jitter factor applied to each interval.
        multiplier: Growth factor between consecutive intervals.
        max_interval: Upper bound in seconds for one interval.
    """

    max_attempts: int = 0
    initial_interval: float = 30
    randomization_factor: float = 0.5
    multiplier: float = 1.5
    max_interval: float = 60 * 10

    def as_dict(self) -> dict[str, JSONValue]:
        """Serialize the policy into its wire form."""
        return {
            "maxAttempts": self.max_attempts,
            "initialInterval": self.initial_interval,
            "randomizationFactor": self.randomization_factor,
            "multiplier": self.multiplier,
            "maxInterval": self.max_interval,
        }


@dataclass(frozen=True, slots=True)
class Manifest:
    """Scheduling metadata attached once to a deferred function."""

    version: int
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    cron: str | None = None
    concurrency: int | None = None
    max_duration: int | None = None

    def as_dict(self) -> dict[str, JSONValue]:
        """Serialize the manifest, omitting unset optional fields."""
        out: dict[str, JSONValue] = {
            "version": self.version,
            "retry": self.retry.as_dict(),
        }
        if self.cron is not None:
            out["cron"] = self.cron
        if self.concurrency is not None:
            out["concurrency"] = self.concurrency
        if self.max_duration is not None:
            out["maxDuration"] = self.max_duration
        return out


@dataclass(frozen=True, slots=True)
class ExecutionOptions:
    """
    Per-call options accumulated by ``delay``, ``add_metadata`` and
    ``discard_after``.
    """

    delay: TimeValue | None = None
    metadata: dict[str, str] | None = None
    discard_after: TimeValue | None = None

    # Holds a dict, so never hashable regardless of contents.
    __hash__ = None  # type: ignore[assignment]


@dataclass(frozen=True, slots=True)
class ExecutionRecord:
    """Execution state kept by the local store."""

    id: str
    state: LocalExecutionState = "started"
    result: Any = None

    @property
    def is_terminal(self) -> bool:
        return self.state != "started"
