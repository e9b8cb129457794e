from __future__ import annotations

import json
from typing import Any

import pytest

from defer_client import HTTPClient, reset_execution_store, set_metrics


class FakeBackend:
    """Scripted stand-in for the backend HTTP API."""

    def __init__(self) -> None:
        self.requests: list[dict[str, Any]] = []
        self.routes: dict[tuple[str, str], list[tuple[int, Any]]] = {}

    def reply(self, method: str, path: str, status: int, body: Any) -> None:
        self.routes.setdefault((method, path), []).append((status, body))

    def send(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        payload: bytes | None,
        timeout_s: float,
    ) -> tuple[int, bytes]:
        path = url.split("://", 1)[1].split("/", 1)[1]
        self.requests.append(
            {
                "method": method,
                "url": url,
                "path": f"/{path}",
                "headers": headers,
                "body": json.loads(payload) if payload else None,
                "timeout_s": timeout_s,
            }
        )
        queue = self.routes.get((method, f"/{path}"))
        if not queue:
            return 500, b'{"message": "unexpected request"}'
        status, body = queue.pop(0) if len(queue) > 1 else queue[0]
        raw = body if isinstance(body, bytes) else json.dumps(body).encode("utf-8")
        return status, raw


@pytest.fixture(autouse=True)
def _isolated_client_state(monkeypatch):
    for name in (
        "DEFER_TOKEN",
        "DEFER_ENDPOINT",
        "DEFER_HTTP_TIMEOUT_S",
        "DEFER_POLL_INTERVAL_S",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_execution_store()
    set_metrics(None)
    yield
    reset_execution_store()
    set_metrics(None)


@pytest.fixture
def backend(monkeypatch) -> FakeBackend:
    """Enable remote mode and route HTTP calls to a ``FakeBackend``."""
    fake = FakeBackend()
    monkeypatch.setenv("DEFER_TOKEN", "test-token")
    monkeypatch.setenv("DEFER_ENDPOINT", "https://defer.test")
    monkeypatch.setenv("DEFER_POLL_INTERVAL_S", "0")
    monkeypatch.setattr(HTTPClient, "http_send", fake.send)
    return fake
