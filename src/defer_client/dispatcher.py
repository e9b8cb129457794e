"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Dispatch of deferred functions to the backend or to the local engine.

Remote mode is selected when a backend token is configured (``DEFER_TOKEN``);
otherwise executions run in-process and are tracked by the local
``ExecutionStateStore`` so lookups behave the same way in both modes.
"""

from __future__ import annotations

import asyncio
import copy
import functools
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from .client import api
from .client.models import (
    CancelExecutionRequest,
    CancelExecutionResponse,
    EnqueueExecutionRequest,
    EnqueueExecutionResponse,
    ExecutionTry,
    FetchExecutionRequest,
    FetchExecutionResponse,
    GetExecutionTriesResponse,
    RescheduleExecutionRequest,
    RescheduleExecutionResponse,
)
from .client.transport import HTTPClient, make_http_client
from .durations import resolve_instant
from .engine import LocalExecutionEngine
from .errors import ExecutionFailedError, ExecutionNotFoundError
from .metrics import get_metrics
from .settings import DeferSettings
from .types import JSONValue, TimeValue
from .utils import new_execution_id, sanitize_function_arguments

if TYPE_CHECKING:
    from .deferred import DeferredFunction

logger = logging.getLogger("defer_client.dispatcher")

_ENGINE = LocalExecutionEngine()
_LOCAL_RUNS: set[asyncio.Task[FetchExecutionResponse]] = set()


def get_http_client(settings: DeferSettings | None = None) -> HTTPClient | None:
    """Return a backend client when a token is configured, else ``None``."""
    return make_http_client(settings or DeferSettings.from_env())


def defer_enabled() -> bool:
    """Whether deferred functions are sent to a remote backend."""
    return DeferSettings.from_env().remote_enabled


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _build_enqueue_request(
    deferred: DeferredFunction, arguments: list[JSONValue]
) -> EnqueueExecutionRequest:
    options = deferred.options
    now = _now()
    schedule_for = now
    if options.delay is not None:
        schedule_for = resolve_instant(options.delay, now)
    discard_at = None
    if options.discard_after is not None:
        discard_at = resolve_instant(options.discard_after, now)
    return EnqueueExecutionRequest(
        name=deferred.name,
        arguments=arguments,
        schedule_for=schedule_for,
        metadata=dict(options.metadata or {}),
        discard_after=discard_at,
    )


def _on_local_run_done(task: asyncio.Task[FetchExecutionResponse]) -> None:
    _LOCAL_RUNS.discard(task)
    if task.cancelled():
        return
    error = task.exception()
    if error is not None:
        logger.error(
            "local execution %s could not be recorded: %s",
            task.get_name(),
            error,
            exc_info=error,
        )


async def enqueue(deferred: DeferredFunction, *args: Any) -> EnqueueExecutionResponse:
    """
    Submit one call of ``deferred``.

    In remote mode the backend response is returned as-is. In local mode a
    new execution id is returned immediately while the function runs in a
    background task; until it finishes the execution is observed as
    ``started``.

    Raises:
        SerializationError: When ``args`` are not JSON-serializable.
    """
    arguments = sanitize_function_arguments(args)
    logger.debug("[%s] invoked.", deferred.name)

    client = get_http_client()
    if client is not None:
        request = _build_enqueue_request(deferred, arguments)
        response = await api.enqueue_execution(client, request)
        get_metrics().incr("executions_enqueued", tags={"mode": "remote"})
        return response

    logger.debug("[%s] no backend token found, executing locally.", deferred.name)
    execution_id = new_execution_id()
    _ENGINE.store.start(execution_id)
    task = asyncio.create_task(
        _ENGINE.run(execution_id, deferred.fn, arguments), name=execution_id
    )
    _LOCAL_RUNS.add(task)
    task.add_done_callback(_on_local_run_done)
    get_metrics().incr("executions_enqueued", tags={"mode": "local"})
    return EnqueueExecutionResponse(id=execution_id)


async def flush_local_executions() -> None:
    """Wait until every in-flight local execution has finished."""
    while _LOCAL_RUNS:
        await asyncio.gather(*list(_LOCAL_RUNS), return_exceptions=True)


def _execution_error(response: FetchExecutionResponse) -> ExecutionFailedError:
    result = response.result
    if isinstance(result, dict) and result.get("message"):
        stack = result.get("stack")
        return ExecutionFailedError(
            str(result["message"]),
            execution_id=response.id,
            stack=stack if isinstance(stack, str) else None,
            result=result,
        )
    if result:
        return ExecutionFailedError(str(result), execution_id=response.id, result=result)
    return ExecutionFailedError(execution_id=response.id)


def await_result(deferred: DeferredFunction) -> Callable[..., Awaitable[Any]]:
    """
    Return an async callable that runs ``deferred`` and waits for its result.

    Raises (from the returned callable):
        ExecutionFailedError: When the execution did not succeed.
    """

    @functools.wraps(deferred.fn)
    async def run(*args: Any) -> Any:
        arguments = sanitize_function_arguments(args)
        settings = DeferSettings.from_env()
        client = get_http_client(settings)

        if client is not None:
            enqueued = await api.enqueue_execution(
                client, _build_enqueue_request(deferred, arguments)
            )
            get_metrics().incr("executions_enqueued", tags={"mode": "remote"})
            response = await api.wait_execution_result(
                client,
                FetchExecutionRequest(id=enqueued.id),
                poll_interval_s=settings.poll_interval_s,
            )
        else:
            execution_id = new_execution_id()
            _ENGINE.store.start(execution_id)
            get_metrics().incr("executions_enqueued", tags={"mode": "local"})
            response = await _ENGINE.run(execution_id, deferred.fn, arguments)

        if response.state != "succeed":
            raise _execution_error(response)
        return response.result

    return run


async def get_execution(execution_id: str) -> FetchExecutionResponse:
    """
    Return the current state of one execution.

    Raises:
        ExecutionNotFoundError: When the id is unknown.
    """
    client = get_http_client()
    if client is not None:
        return await api.fetch_execution(client, FetchExecutionRequest(id=execution_id))

    record = _ENGINE.store.get(execution_id)
    if record is None:
        raise ExecutionNotFoundError()
    return FetchExecutionResponse(
        id=record.id, state=record.state, result=copy.deepcopy(record.result)
    )


async def get_execution_tries(execution_id: str) -> GetExecutionTriesResponse:
    """
    Return the attempts made for one execution.

    Local executions always report exactly one attempt.
    """
    client = get_http_client()
    if client is not None:
        return await api.get_execution_tries(
            client, FetchExecutionRequest(id=execution_id)
        )

    record = _ENGINE.store.get(execution_id)
    if record is None:
        raise ExecutionNotFoundError()
    return [ExecutionTry(id=record.id, state=record.state)]


async def cancel_execution(execution_id: str, force: bool = False) -> CancelExecutionResponse:
    """Cancel one execution; a no-op for local executions."""
    client = get_http_client()
    if client is not None:
        return await api.cancel_execution(
            client, CancelExecutionRequest(id=execution_id, force=force)
        )
    return CancelExecutionResponse()


async def reschedule_execution(
    execution_id: str, schedule_for: TimeValue | None = None
) -> RescheduleExecutionResponse:
    """
    Move one execution to ``schedule_for`` (a duration or instant; now when
    omitted). A no-op for local executions.
    """
    now = _now()
    when = resolve_instant(schedule_for, now) if schedule_for is not None else now
    client = get_http_client()
    if client is not None:
        return await api.reschedule_execution(
            client, RescheduleExecutionRequest(id=execution_id, schedule_for=when)
        )
    return RescheduleExecutionResponse()
