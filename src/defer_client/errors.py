"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Error hierarchy for deferred execution.
"""

from __future__ import annotations

from typing import Any


class DeferError(RuntimeError):
    """Base error for all deferred execution failures."""


class InvalidConfigurationError(DeferError, ValueError):
    """Raised when a deferred function is declared with invalid options."""


class InvalidDurationError(DeferError, ValueError):
    """Raised when a duration or instant value cannot be resolved."""


class SerializationError(DeferError):
    """Raised when arguments or results cannot round-trip through JSON."""


class APIError(DeferError):
    """
    Error reported by the execution backend.

    Attributes:
        code: Short machine-readable error code.
    """

    def __init__(self, message: str, code: str) -> None:
        super().__init__(message)
        self.code = code


class ExecutionNotFoundError(APIError):
    """Raised when an execution id is unknown."""

    def __init__(self, message: str = "execution not found") -> None:
        super().__init__(message, "not found")


class HTTPRequestError(APIError):
    """Raised when the backend answers with a non-2xx status or is unreachable."""

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        body: str = "",
    ) -> None:
        super().__init__(message, "http error")
        self.status = status
        self.body = body


class ProtocolError(APIError):
    """Raised when a backend response does not have the expected shape."""

    def __init__(self, message: str) -> None:
        super().__init__(message, "invalid response")


class ExecutionFailedError(DeferError):
    """
    Raised by ``await_result`` when the deferred function failed.

    Attributes:
        execution_id: Identifier of the failed execution.
        stack: Traceback captured where the function raised, when known.
        result: Raw failure payload stored for the execution.
    """

    def __init__(
        self,
        message: str = "Defer execution failed",
        *,
        execution_id: str | None = None,
        stack: str | None = None,
        result: Any = None,
    ) -> None:
        super().__init__(message)
        self.execution_id = execution_id
        self.stack = stack
        self.result = result
