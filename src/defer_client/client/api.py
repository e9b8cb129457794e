"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Backend API operations built on ``HTTPClient``.
"""

from __future__ import annotations

import asyncio
import urllib.parse
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from ..errors import ProtocolError
from ..types import is_terminal_state
from .models import (
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
from .transport import HTTPClient

M = TypeVar("M", bound=BaseModel)


def _parse(model: type[M], data: Any) -> M:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise ProtocolError(f"Unexpected {model.__name__} payload: {e}") from e


def _execution_path(execution_id: str, suffix: str = "") -> str:
    quoted = urllib.parse.quote(execution_id, safe="")
    return f"/public/v1/executions/{quoted}{suffix}"


async def enqueue_execution(
    client: HTTPClient, request: EnqueueExecutionRequest
) -> EnqueueExecutionResponse:
    data = await client.request("POST", "/public/v1/enqueue", request.to_wire())
    return _parse(EnqueueExecutionResponse, data)


async def fetch_execution(
    client: HTTPClient, request: FetchExecutionRequest
) -> FetchExecutionResponse:
    data = await client.request("GET", _execution_path(request.id))
    return _parse(FetchExecutionResponse, data)


async def wait_execution_result(
    client: HTTPClient,
    request: FetchExecutionRequest,
    *,
    poll_interval_s: float = 1.0,
) -> FetchExecutionResponse:
    """Poll one execution until it reaches a terminal state."""
    while True:
        response = await fetch_execution(client, request)
        if is_terminal_state(response.state):
            return response
        await asyncio.sleep(poll_interval_s)


async def cancel_execution(
    client: HTTPClient, request: CancelExecutionRequest
) -> CancelExecutionResponse:
    data = await client.request(
        "POST", _execution_path(request.id, "/cancel"), {"force": request.force}
    )
    return _parse(CancelExecutionResponse, data)


async def get_execution_tries(
    client: HTTPClient, request: FetchExecutionRequest
) -> GetExecutionTriesResponse:
    data = await client.request("GET", _execution_path(request.id, "/tries"))
    if not isinstance(data, list):
        raise ProtocolError("Unexpected execution tries payload: expected a list")
    return [_parse(ExecutionTry, row) for row in data]


async def reschedule_execution(
    client: HTTPClient, request: RescheduleExecutionRequest
) -> RescheduleExecutionResponse:
    body = request.to_wire()
    body.pop("id", None)
    data = await client.request("PATCH", _execution_path(request.id, "/schedule"), body)
    return _parse(RescheduleExecutionResponse, data)
