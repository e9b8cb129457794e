"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Metrics adapters for dispatch observability.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol


class DeferMetrics(Protocol):
    """Counter sink called by the dispatcher and the local engine."""

    def incr(
        self, name: str, value: int = 1, *, tags: Mapping[str, str] | None = None
    ) -> None:
        """Add ``value`` to counter ``name``, split by ``tags``."""


class NoOpDeferMetrics:
    """Discards every counter update."""

    def incr(
        self, name: str, value: int = 1, *, tags: Mapping[str, str] | None = None
    ) -> None:
        return None


class PrometheusDeferMetrics:
    """
    Export dispatch counters through ``prometheus_client``.

    One ``Counter`` is registered per metric name and tag-key set, on
    ``registry`` or the process default. Names get a ``_total`` suffix from
    the client library, so ``executions_enqueued`` is scraped as
    ``defer_executions_enqueued_total``.
    """

    def __init__(self, *, namespace: str = "defer", registry: object | None = None) -> None:
        try:
            from prometheus_client import REGISTRY, Counter
        except ModuleNotFoundError as exc:  # pragma: no cover
            raise RuntimeError(
                "install the `prometheus` extra to use PrometheusDeferMetrics"
            ) from exc

        self._counter_cls = Counter
        self._namespace = namespace
        self._registry = registry if registry is not None else REGISTRY
        self._counters: dict[tuple[str, tuple[str, ...]], Any] = {}

    def _counter(self, name: str, labels: tuple[str, ...]) -> Any:
        counter = self._counters.get((name, labels))
        if counter is None:
            counter = self._counter_cls(
                name=name,
                documentation=f"defer client counter {name}",
                namespace=self._namespace,
                labelnames=labels,
                registry=self._registry,
            )
            self._counters[(name, labels)] = counter
        return counter

    def incr(
        self, name: str, value: int = 1, *, tags: Mapping[str, str] | None = None
    ) -> None:
        tags = tags or {}
        labels = tuple(sorted(tags))
        counter = self._counter(name, labels)
        if not labels:
            counter.inc(value)
            return
        counter.labels(**{label: str(tags[label]) for label in labels}).inc(value)


_METRICS: DeferMetrics = NoOpDeferMetrics()


def get_metrics() -> DeferMetrics:
    """Return the metrics sink used by the dispatcher."""
    return _METRICS


def set_metrics(metrics: DeferMetrics | None) -> None:
    """Install a metrics sink; ``None`` restores the no-op default."""
    global _METRICS
    _METRICS = metrics if metrics is not None else NoOpDeferMetrics()
