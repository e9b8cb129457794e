"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

In-process execution of deferred functions when no backend is configured.
"""

from __future__ import annotations

import copy
import inspect
import logging
import traceback
from collections.abc import Callable, Sequence
from typing import Any

from .client.models import FetchExecutionResponse
from .errors import SerializationError
from .metrics import get_metrics
from .store import ExecutionStateStore, get_execution_store
from .types import JSONValue, LocalExecutionState
from .utils import json_roundtrip

logger = logging.getLogger("defer_client.engine")


def describe_exception(error: BaseException) -> dict[str, JSONValue]:
    """Capture an exception as a serializable failure payload."""
    cause = error.__cause__
    return {
        "name": type(error).__name__,
        "message": str(error),
        "cause": repr(cause) if cause is not None else None,
        "stack": "".join(
            traceback.format_exception(type(error), error, error.__traceback__)
        ),
    }


class LocalExecutionEngine:
    """
    Runs one deferred function in-process and records its outcome.

    Function failures are stored as ``failed`` executions; they are not
    raised. Only a result that cannot be serialized escapes as
    ``SerializationError``, in which case the store is left untouched.
    """

    def __init__(self, store: ExecutionStateStore | None = None) -> None:
        self._store = store

    @property
    def store(self) -> ExecutionStateStore:
        return self._store if self._store is not None else get_execution_store()

    async def run(
        self,
        execution_id: str,
        fn: Callable[..., Any],
        args: Sequence[JSONValue],
    ) -> FetchExecutionResponse:
        name = getattr(fn, "__name__", repr(fn))
        state: LocalExecutionState = "succeed"
        try:
            outcome = fn(*args)
            if inspect.isawaitable(outcome):
                outcome = await outcome
        except Exception as error:
            logger.debug("[%s][%s] local execution failed: %s", name, execution_id, error)
            state = "failed"
            outcome = describe_exception(error)

        try:
            result = json_roundtrip(outcome)
        except SerializationError as e:
            raise SerializationError(f"cannot serialize function return: {e}") from e

        record = self.store.finish(execution_id, state=state, result=result)
        get_metrics().incr("local_executions_finished", tags={"state": record.state})
        logger.debug("[%s][%s] local execution %s", name, execution_id, record.state)
        return FetchExecutionResponse(
            id=record.id, state=record.state, result=copy.deepcopy(record.result)
        )
