"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

HTTP transport for the execution backend API.
"""

from __future__ import annotations

import asyncio
import base64
import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from collections.abc import Callable
from typing import Any

from ..errors import ExecutionNotFoundError, HTTPRequestError, ProtocolError
from ..settings import DeferSettings

logger = logging.getLogger("defer_client.client")

# (method, url, headers, body, timeout_s) -> (status, response body)
SendFn = Callable[[str, str, dict[str, str], bytes | None, float], tuple[int, bytes]]

USER_AGENT = "defer-client-python"


class HTTPClient:
    """JSON-over-HTTP client authenticated with a backend token."""

    def __init__(
        self,
        endpoint: str,
        token: str,
        *,
        timeout_s: float = 30.0,
        send: SendFn | None = None,
    ) -> None:
        parsed = urllib.parse.urlparse(endpoint)
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            raise ValueError(f"Invalid backend endpoint: {endpoint!r}")
        self._endpoint = endpoint.rstrip("/")
        self._timeout_s = timeout_s
        self._send = send or self.http_send
        credentials = base64.b64encode(f":{token}".encode("utf-8")).decode("ascii")
        self._headers = {
            "Authorization": f"Basic {credentials}",
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
        }

    @property
    def endpoint(self) -> str:
        return self._endpoint

    async def request(
        self,
        method: str,
        path: str,
        body: dict[str, Any] | None = None,
    ) -> Any:
        """
        Send one request and return the decoded JSON response.

        Raises:
            ExecutionNotFoundError: On HTTP 404.
            HTTPRequestError: On any other non-2xx status or network failure.
            ProtocolError: When the response body is not valid JSON.
        """
        url = f"{self._endpoint}/{path.lstrip('/')}"
        payload = json.dumps(body).encode("utf-8") if body is not None else None
        logger.debug("%s %s", method, url)
        status, raw = await asyncio.to_thread(
            self._send, method, url, dict(self._headers), payload, self._timeout_s
        )

        text = raw.decode("utf-8", errors="replace")
        if status == 404:
            raise ExecutionNotFoundError(_error_message(text) or "execution not found")
        if status < 200 or status >= 300:
            raise HTTPRequestError(
                f"HTTP {status} calling {method} {url}: {_error_message(text) or text}",
                status=status,
                body=text,
            )
        if not text.strip():
            return {}
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise ProtocolError(f"Invalid JSON response from {method} {url}") from e

    def http_send(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        payload: bytes | None,
        timeout_s: float,
    ) -> tuple[int, bytes]:
        req = urllib.request.Request(url, data=payload, method=method, headers=headers)
        try:
            with urllib.request.urlopen(req, timeout=timeout_s) as resp:  # noqa: S310
                return resp.status, resp.read()
        except urllib.error.HTTPError as e:
            try:
                body = e.read()
            except OSError:
                body = b""
            return e.code, body
        except urllib.error.URLError as e:
            raise HTTPRequestError(
                f"Network error calling {method} {url}: {e.reason}"
            ) from e
        except OSError as e:
            # Read timeouts and dropped connections surface outside URLError.
            raise HTTPRequestError(f"Network error calling {method} {url}: {e}") from e


def _error_message(text: str) -> str | None:
    try:
        decoded = json.loads(text)
    except json.JSONDecodeError:
        return None
    if isinstance(decoded, dict):
        message = decoded.get("message")
        if isinstance(message, str) and message:
            return message
    return None


def make_http_client(settings: DeferSettings, *, send: SendFn | None = None) -> HTTPClient | None:
    """Build a client from settings, or return ``None`` when no token is set."""
    if not settings.access_token:
        return None
    return HTTPClient(
        settings.endpoint,
        settings.access_token,
        timeout_s=settings.timeout_s,
        send=send,
    )
