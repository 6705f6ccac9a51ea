"""Shared HTTP plumbing for the presign and delete relays.

Both relays are small JSON functions behind the same API key. Gateway
errors and connection failures are retried with exponential backoff;
everything else is handed back to the caller to interpret.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import httpx

from wallsync.core.exceptions import NetworkError, RetryExhaustedError
from wallsync.core.validation import validate_url

logger = logging.getLogger(__name__)

# =============================================================================
# Constants
# =============================================================================

DEFAULT_TIMEOUT = 30
DEFAULT_MAX_RETRIES = 2
RETRY_BACKOFF_BASE = 2
RETRYABLE_STATUS_CODES = frozenset({502, 503, 504})

# Relay error bodies look like {"error": ...}; some also use message/details
ERROR_BODY_KEYS = ("error", "message", "details")
MAX_ERROR_TEXT = 200


def error_message(resp: httpx.Response) -> str:
    """Best human-readable reason from a failed relay response."""
    try:
        body = resp.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        reason = next((body[k] for k in ERROR_BODY_KEYS if body.get(k)), None)
        if reason:
            return str(reason)

    return resp.text.strip()[:MAX_ERROR_TEXT] or f"HTTP {resp.status_code}"


# =============================================================================
# RelayClient
# =============================================================================


@dataclass
class RelayClient:
    """One relay endpoint plus its credentials and retry budget.

    ``transport`` and ``sleep`` are injectable so tests can run the retry
    loop against ``httpx.MockTransport`` without waiting.
    """

    endpoint: str
    api_key: str | None = None
    timeout: int = DEFAULT_TIMEOUT
    max_retries: int = DEFAULT_MAX_RETRIES
    verify_ssl: bool = True
    transport: httpx.BaseTransport | None = field(default=None, repr=False)
    sleep: Callable[[float], None] = field(default=time.sleep, repr=False)
    _client: httpx.Client | None = field(init=False, default=None, repr=False)

    def __post_init__(self) -> None:
        self.endpoint = validate_url(self.endpoint)

    @property
    def client(self) -> httpx.Client:
        """Lazily opened connection pool, reused across calls."""
        if self._client is None:
            self._client = httpx.Client(
                timeout=self.timeout,
                verify=self.verify_ssl,
                transport=self.transport,
                follow_redirects=True,
            )
        return self._client

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> RelayClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    @property
    def headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            # Gateway reads the key from either header
            headers.update({"Authorization": f"Bearer {self.api_key}", "apikey": self.api_key})
        return headers

    def post_json(self, payload: dict[str, Any], *, operation: str = "request") -> httpx.Response:
        """POST ``payload`` as JSON and return the final response.

        A 502/503/504 or any transport failure (connect, timeout, reset
        connection, protocol error) is retried after 2s, then 4s, and so on
        up to ``max_retries`` times. A gateway error on the last
        attempt is returned like any other response.

        Raises:
            RetryExhaustedError: If no attempt produced a response at all.
        """
        attempts = self.max_retries + 1
        last_error: Exception | None = None

        for attempt in range(1, attempts + 1):
            try:
                resp = self.client.post(self.endpoint, json=payload, headers=self.headers)
            except httpx.TimeoutException:
                last_error = NetworkError(self.endpoint, f"Timeout after {self.timeout}s")
                reason = str(last_error)
            except httpx.ConnectError as e:
                last_error = NetworkError(self.endpoint, str(e) or "connection refused")
                reason = str(last_error)
            except httpx.TransportError as e:
                last_error = NetworkError(self.endpoint, f"{type(e).__name__}: {e}")
                reason = str(last_error)
            else:
                if resp.status_code not in RETRYABLE_STATUS_CODES or attempt == attempts:
                    return resp
                reason = f"HTTP {resp.status_code}"

            if attempt < attempts:
                delay = RETRY_BACKOFF_BASE**attempt
                logger.warning(
                    "%s: %s (attempt %d/%d), retrying in %ds",
                    operation,
                    reason,
                    attempt,
                    attempts,
                    delay,
                )
                self.sleep(delay)

        raise RetryExhaustedError(operation, attempts, last_error)
