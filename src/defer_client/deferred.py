"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Deferred function wrappers and the modifiers that derive new ones.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, overload

from pydantic import TypeAdapter, ValidationError

from .client.models import EnqueueExecutionResponse
from .constants import INTERNAL_VERSION
from .dispatcher import enqueue
from .errors import InvalidConfigurationError
from .retry import RetryConfig, resolve_retry_policy
from .types import Concurrency, ExecutionOptions, Manifest, TimeValue

_CONCURRENCY = TypeAdapter(Concurrency)


@dataclass(frozen=True, slots=True)
class DeferredFunction:
    """
    Callable wrapper whose invocation enqueues an execution.

    Instances are immutable snapshots: modifiers such as ``delay`` return a
    new ``DeferredFunction`` sharing ``fn`` and ``manifest`` with updated
    ``options``.

    Attributes:
        fn: The original function.
        manifest: Retry/schedule/concurrency metadata.
        options: Per-call execution options.
    """

    fn: Callable[..., Any]
    manifest: Manifest
    options: ExecutionOptions = field(default_factory=ExecutionOptions)

    __hash__ = None  # type: ignore[assignment]

    @property
    def name(self) -> str:
        return getattr(self.fn, "__name__", type(self.fn).__name__)

    async def __call__(self, *args: Any) -> EnqueueExecutionResponse:
        return await enqueue(self, *args)


def _validate_concurrency(value: int | None) -> int | None:
    if value is None:
        return None
    try:
        return _CONCURRENCY.validate_python(value, strict=True)
    except ValidationError as e:
        raise InvalidConfigurationError(
            f"concurrency must be an integer between 0 and 50, got {value!r}"
        ) from e


def _build_manifest(
    *,
    retry: RetryConfig,
    concurrency: int | None,
    max_duration: int | None,
    cron: str | None = None,
) -> Manifest:
    return Manifest(
        version=INTERNAL_VERSION,
        retry=resolve_retry_policy(retry),
        cron=cron,
        concurrency=_validate_concurrency(concurrency),
        max_duration=max_duration,
    )


def _require_callable(fn: Any) -> None:
    if not callable(fn):
        raise InvalidConfigurationError(
            f"expected a callable to defer, got {type(fn).__name__}"
        )


@overload
def defer(
    fn: Callable[..., Any],
    *,
    retry: RetryConfig = None,
    concurrency: int | None = None,
    max_duration: int | None = None,
) -> DeferredFunction: ...


@overload
def defer(
    fn: None = None,
    *,
    retry: RetryConfig = None,
    concurrency: int | None = None,
    max_duration: int | None = None,
) -> Callable[[Callable[..., Any]], DeferredFunction]: ...


def defer(
    fn: Callable[..., Any] | None = None,
    *,
    retry: RetryConfig = None,
    concurrency: int | None = None,
    max_duration: int | None = None,
) -> DeferredFunction | Callable[[Callable[..., Any]], DeferredFunction]:
    """
    Wrap ``fn`` into a ``DeferredFunction``.

    Usable directly (``defer(fn)``) or as a decorator (``@defer`` and
    ``@defer(retry=3)``).

    Args:
        fn: Function to defer.
        retry: ``None``/``bool``/``int`` or a partial ``RetryOptions`` mapping.
        concurrency: Maximum concurrent executions (0 to 50).
        max_duration: Maximum execution time in seconds.

    Raises:
        InvalidConfigurationError: On invalid retry or concurrency options.
    """
    manifest = _build_manifest(
        retry=retry, concurrency=concurrency, max_duration=max_duration
    )

    def wrap(target: Callable[..., Any]) -> DeferredFunction:
        _require_callable(target)
        return DeferredFunction(fn=target, manifest=manifest)

    if fn is None:
        return wrap
    return wrap(fn)


def defer_cron(
    fn: Callable[..., Any],
    cron_expr: str,
    *,
    retry: RetryConfig = None,
    concurrency: int | None = None,
    max_duration: int | None = None,
) -> DeferredFunction:
    """Wrap ``fn`` into a ``DeferredFunction`` scheduled by ``cron_expr``."""
    _require_callable(fn)
    if not isinstance(cron_expr, str) or not cron_expr.strip():
        raise InvalidConfigurationError("cron expression must be a non-empty string")
    manifest = _build_manifest(
        retry=retry,
        concurrency=concurrency,
        max_duration=max_duration,
        cron=cron_expr.strip(),
    )
    return DeferredFunction(fn=fn, manifest=manifest)


def _require_deferred(deferred: Any) -> None:
    if not isinstance(deferred, DeferredFunction):
        raise InvalidConfigurationError(
            f"expected a DeferredFunction, got {type(deferred).__name__}"
        )


def _with_options(deferred: DeferredFunction, **changes: Any) -> DeferredFunction:
    _require_deferred(deferred)
    options = dataclasses.replace(deferred.options, **changes)
    return DeferredFunction(fn=deferred.fn, manifest=deferred.manifest, options=options)


def delay(deferred: DeferredFunction, value: TimeValue) -> DeferredFunction:
    """Return a copy of ``deferred`` scheduled after ``value``."""
    return _with_options(deferred, delay=value)


def add_metadata(deferred: DeferredFunction, metadata: Mapping[str, str]) -> DeferredFunction:
    """Return a copy of ``deferred`` with ``metadata`` merged into its tags."""
    _require_deferred(deferred)
    for key, value in metadata.items():
        if not isinstance(key, str) or not isinstance(value, str):
            raise InvalidConfigurationError("metadata keys and values must be strings")
    merged = {**(deferred.options.metadata or {}), **metadata}
    return _with_options(deferred, metadata=merged)


def discard_after(deferred: DeferredFunction, value: TimeValue) -> DeferredFunction:
    """Return a copy of ``deferred`` discarded when not started by ``value``."""
    return _with_options(deferred, discard_after=value)
