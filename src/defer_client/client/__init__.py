"""
Backend client package.

Contains the HTTP transport, wire models and API operations.
"""

from .api import (
    cancel_execution,
    enqueue_execution,
    fetch_execution,
    get_execution_tries,
    reschedule_execution,
    wait_execution_result,
)
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
from .transport import HTTPClient, SendFn, make_http_client

__all__ = [
    "HTTPClient",
    "SendFn",
    "make_http_client",
    "enqueue_execution",
    "fetch_execution",
    "wait_execution_result",
    "cancel_execution",
    "get_execution_tries",
    "reschedule_execution",
    "EnqueueExecutionRequest",
    "EnqueueExecutionResponse",
    "FetchExecutionRequest",
    "FetchExecutionResponse",
    "CancelExecutionRequest",
    "CancelExecutionResponse",
    "ExecutionTry",
    "GetExecutionTriesResponse",
    "RescheduleExecutionRequest",
    "RescheduleExecutionResponse",
]
