"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Deferred function client.

Wrap a function with ``defer`` and calling it enqueues an execution on the
backend configured by ``DEFER_TOKEN``. Without a token, executions run
in-process and are tracked locally so lookups work the same way.

Quick start::

    from defer_client import await_result, defer, delay, get_execution

    @defer(retry=3, concurrency=5)
    async def send_report(user_id: str) -> dict:
        ...

    execution = await send_report("u-1")
    state = await get_execution(execution.id)

    later = delay(send_report, "1h")
    await later("u-2")

    report = await await_result(send_report)("u-3")
"""

from .client import (
    CancelExecutionResponse,
    EnqueueExecutionRequest,
    EnqueueExecutionResponse,
    ExecutionTry,
    FetchExecutionResponse,
    GetExecutionTriesResponse,
    HTTPClient,
    RescheduleExecutionResponse,
    make_http_client,
)
from .constants import INTERNAL_VERSION, RETRY_MAX_ATTEMPTS_PLACEHOLDER
from .deferred import (
    DeferredFunction,
    add_metadata,
    defer,
    defer_cron,
    delay,
    discard_after,
)
from .dispatcher import (
    await_result,
    cancel_execution,
    defer_enabled,
    enqueue,
    flush_local_executions,
    get_execution,
    get_execution_tries,
    reschedule_execution,
)
from .durations import parse_duration, resolve_instant
from .engine import LocalExecutionEngine
from .errors import (
    APIError,
    DeferError,
    ExecutionFailedError,
    ExecutionNotFoundError,
    HTTPRequestError,
    InvalidConfigurationError,
    InvalidDurationError,
    ProtocolError,
    SerializationError,
)
from .metrics import DeferMetrics, NoOpDeferMetrics, PrometheusDeferMetrics, set_metrics
from .retry import RetryConfig, RetryOptions, resolve_retry_policy
from .settings import DeferSettings
from .store import ExecutionStateStore, get_execution_store, reset_execution_store
from .types import (
    Concurrency,
    ExecutionOptions,
    ExecutionRecord,
    ExecutionState,
    Manifest,
    RetryPolicy,
)

__all__ = [
    "defer",
    "defer_cron",
    "delay",
    "add_metadata",
    "discard_after",
    "DeferredFunction",
    "enqueue",
    "await_result",
    "get_execution",
    "get_execution_tries",
    "cancel_execution",
    "reschedule_execution",
    "defer_enabled",
    "flush_local_executions",
    "LocalExecutionEngine",
    "ExecutionStateStore",
    "get_execution_store",
    "reset_execution_store",
    "resolve_retry_policy",
    "RetryConfig",
    "RetryOptions",
    "parse_duration",
    "resolve_instant",
    "RetryPolicy",
    "Manifest",
    "ExecutionOptions",
    "ExecutionRecord",
    "ExecutionState",
    "Concurrency",
    "INTERNAL_VERSION",
    "RETRY_MAX_ATTEMPTS_PLACEHOLDER",
    "DeferSettings",
    "HTTPClient",
    "make_http_client",
    "EnqueueExecutionRequest",
    "EnqueueExecutionResponse",
    "FetchExecutionResponse",
    "CancelExecutionResponse",
    "ExecutionTry",
    "GetExecutionTriesResponse",
    "RescheduleExecutionResponse",
    "DeferMetrics",
    "NoOpDeferMetrics",
    "PrometheusDeferMetrics",
    "set_metrics",
    "DeferError",
    "InvalidConfigurationError",
    "InvalidDurationError",
    "SerializationError",
    "APIError",
    "ExecutionNotFoundError",
    "HTTPRequestError",
    "ProtocolError",
    "ExecutionFailedError",
]
