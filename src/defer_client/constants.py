"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Shared constants for manifests, retry defaults and the remote API.
"""

from __future__ import annotations

# Schema version of the manifest attached to every deferred function.
INTERNAL_VERSION = 3

# Attempt count used when retries are enabled without an explicit count.
RETRY_MAX_ATTEMPTS_PLACEHOLDER = 13

DEFAULT_ENDPOINT = "https://api.defer.run"
DEFAULT_HTTP_TIMEOUT_S = 30.0
DEFAULT_POLL_INTERVAL_S = 1.0

CONCURRENCY_MIN = 0
CONCURRENCY_MAX = 50
