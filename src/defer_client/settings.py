"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Client settings and environment loading.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from .constants import DEFAULT_ENDPOINT, DEFAULT_HTTP_TIMEOUT_S, DEFAULT_POLL_INTERVAL_S


def _env_str(name: str) -> str | None:
    raw = os.getenv(name)
    if raw is None:
        return None
    value = raw.strip()
    return value or None


@dataclass(frozen=True, slots=True)
class DeferSettings:
    """
    Settings for reaching the execution backend.

    Attributes:
        access_token: Backend credential; remote mode is active when set.
        endpoint: Base URL of the backend API.
        timeout_s: HTTP timeout for one request.
        poll_interval_s: Delay between polls while awaiting a result.
    """

    access_token: str | None = None
    endpoint: str = DEFAULT_ENDPOINT
    timeout_s: float = DEFAULT_HTTP_TIMEOUT_S
    poll_interval_s: float = DEFAULT_POLL_INTERVAL_S

    @property
    def remote_enabled(self) -> bool:
        return bool(self.access_token)

    @staticmethod
    def from_env() -> "DeferSettings":
        """Load settings from environment variables."""
        return DeferSettings(
            access_token=_env_str("DEFER_TOKEN"),
            endpoint=_env_str("DEFER_ENDPOINT") or DEFAULT_ENDPOINT,
            timeout_s=float(
                _env_str("DEFER_HTTP_TIMEOUT_S") or DEFAULT_HTTP_TIMEOUT_S
            ),
            poll_interval_s=float(
                _env_str("DEFER_POLL_INTERVAL_S") or DEFAULT_POLL_INTERVAL_S
            ),
        )
