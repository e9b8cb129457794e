from __future__ import annotations

import asyncio
import base64

import pytest

from defer_client import (
    DeferSettings,
    ExecutionNotFoundError,
    HTTPClient,
    HTTPRequestError,
    ProtocolError,
    make_http_client,
)
from defer_client.client import api
from defer_client.client.models import FetchExecutionRequest


def run_async(coro):
    return asyncio.run(coro)


def _client(send) -> HTTPClient:
    return HTTPClient("https://defer.test/", "secret", timeout_s=5, send=send)


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("DEFER_TOKEN", " tok ")
    monkeypatch.setenv("DEFER_ENDPOINT", "https://custom.example")
    monkeypatch.setenv("DEFER_HTTP_TIMEOUT_S", "12.5")
    settings = DeferSettings.from_env()
    assert settings.access_token == "tok"
    assert settings.endpoint == "https://custom.example"
    assert settings.timeout_s == 12.5
    assert settings.remote_enabled is True


def test_settings_default_to_local_mode():
    settings = DeferSettings.from_env()
    assert settings.access_token is None
    assert settings.endpoint == "https://api.defer.run"
    assert make_http_client(settings) is None


def test_request_sends_basic_auth_and_json_body():
    seen = {}

    def send(method, url, headers, payload, timeout_s):
        seen.update(method=method, url=url, headers=headers, payload=payload, timeout_s=timeout_s)
        return 200, b'{"id": "exec-1"}'

    out = run_async(_client(send).request("POST", "/public/v1/enqueue", {"name": "f"}))

    assert out == {"id": "exec-1"}
    assert seen["method"] == "POST"
    assert seen["url"] == "https://defer.test/public/v1/enqueue"
    assert seen["payload"] == b'{"name": "f"}'
    assert seen["timeout_s"] == 5
    expected = base64.b64encode(b":secret").decode("ascii")
    assert seen["headers"]["Authorization"] == f"Basic {expected}"


def test_not_found_maps_to_execution_not_found():
    client = _client(lambda *_: (404, b'{"message": "no such execution"}'))
    with pytest.raises(ExecutionNotFoundError, match="no such execution"):
        run_async(client.request("GET", "/public/v1/executions/x"))


def test_server_error_maps_to_http_request_error():
    client = _client(lambda *_: (503, b"unavailable"))
    with pytest.raises(HTTPRequestError) as info:
        run_async(client.request("GET", "/public/v1/executions/x"))
    assert info.value.status == 503
    assert info.value.body == "unavailable"


def test_invalid_json_maps_to_protocol_error():
    client = _client(lambda *_: (200, b"<html>"))
    with pytest.raises(ProtocolError):
        run_async(client.request("GET", "/public/v1/executions/x"))


def test_unexpected_payload_shape_maps_to_protocol_error():
    client = _client(lambda *_: (200, b'{"state": "started"}'))
    with pytest.raises(ProtocolError, match="FetchExecutionResponse"):
        run_async(api.fetch_execution(client, FetchExecutionRequest(id="x")))


def test_invalid_endpoint_is_rejected():
    with pytest.raises(ValueError, match="endpoint"):
        HTTPClient("ftp://defer.test", "secret")


def test_wait_execution_result_polls_until_terminal():
    states = iter(["created", "started", "succeed"])

    def send(method, url, headers, payload, timeout_s):
        return 200, f'{{"id": "exec-1", "state": "{next(states)}", "result": 7}}'.encode()

    response = run_async(
        api.wait_execution_result(
            _client(send), FetchExecutionRequest(id="exec-1"), poll_interval_s=0
        )
    )
    assert response.state == "succeed"
    assert response.result == 7


def test_wait_execution_result_keeps_polling_unknown_states():
    states = iter(["running", "succeed"])

    def send(method, url, headers, payload, timeout_s):
        return 200, f'{{"id": "exec-1", "state": "{next(states)}"}}'.encode()

    response = run_async(
        api.wait_execution_result(
            _client(send), FetchExecutionRequest(id="exec-1"), poll_interval_s=0
        )
    )
    assert response.state == "succeed"


@pytest.mark.parametrize("error", [TimeoutError("timed out"), ConnectionResetError("reset")])
def test_socket_failures_map_to_http_request_error(monkeypatch, error):
    def urlopen(req, timeout):
        raise error

    monkeypatch.setattr("urllib.request.urlopen", urlopen)
    client = HTTPClient("https://defer.test", "secret", timeout_s=1)

    with pytest.raises(HTTPRequestError, match="Network error"):
        run_async(client.request("GET", "/public/v1/executions/exec-1"))
