"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

In-process execution state store used when no backend is configured.
"""

from __future__ import annotations

import threading
from typing import Any

from .types import ExecutionRecord, LocalExecutionState


class ExecutionStateStore:
    """
    Mapping from execution id to its current ``ExecutionRecord``.

    Records start as ``started`` and move once to ``succeed`` or ``failed``;
    terminal records are immutable and later writes are ignored. Entries are
    never evicted, so the store grows for the lifetime of the process. Use
    ``clear()`` or ``reset_execution_store()`` to release them explicitly.
    """

    def __init__(self) -> None:
        self._records: dict[str, ExecutionRecord] = {}

    def start(self, execution_id: str) -> ExecutionRecord:
        """Insert a ``started`` placeholder for a freshly issued id."""
        if execution_id in self._records:
            raise KeyError(f"Execution '{execution_id}' already exists")
        record = ExecutionRecord(id=execution_id)
        self._records[execution_id] = record
        return record

    def finish(
        self,
        execution_id: str,
        *,
        state: LocalExecutionState,
        result: Any = None,
    ) -> ExecutionRecord:
        """
        Move one record to a terminal state.

        Returns the stored record, which is the earlier terminal record when
        the execution had already finished.
        """
        if state == "started":
            raise ValueError("finish() requires a terminal state")
        current = self._records.get(execution_id)
        if current is not None and current.is_terminal:
            return current
        record = ExecutionRecord(id=execution_id, state=state, result=result)
        self._records[execution_id] = record
        return record

    def get(self, execution_id: str) -> ExecutionRecord | None:
        """Return one record by id, or ``None`` when unknown."""
        return self._records.get(execution_id)

    def clear(self) -> None:
        self._records.clear()

    def __contains__(self, execution_id: object) -> bool:
        return execution_id in self._records

    def __len__(self) -> int:
        return len(self._records)


_EXECUTION_STORE: ExecutionStateStore | None = None
_EXECUTION_STORE_LOCK = threading.Lock()


def get_execution_store() -> ExecutionStateStore:
    """Return process-wide execution store singleton."""
    global _EXECUTION_STORE
    if _EXECUTION_STORE is not None:
        return _EXECUTION_STORE
    with _EXECUTION_STORE_LOCK:
        if _EXECUTION_STORE is None:
            _EXECUTION_STORE = ExecutionStateStore()
    return _EXECUTION_STORE


def reset_execution_store() -> None:
    """Reset execution store singleton (for tests)."""
    global _EXECUTION_STORE
    with _EXECUTION_STORE_LOCK:
        _EXECUTION_STORE = None
