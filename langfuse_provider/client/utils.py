"""Utilities: retry/backoff, request-ID helpers, safe logging."""

from __future__ import annotations

import datetime
import json
import time
import uuid
from typing import Any, Dict, Optional

import httpx

RETRYABLE_STATUS_CODES = frozenset({502, 503, 504})


def generate_request_id() -> str:
    """Generate a short UUID4 hex string for X-Request-ID."""
    return uuid.uuid4().hex[:12]


def retry_with_backoff(
    fn,
    *,
    retries: int = 2,
    backoff_base: float = 0.5,
    retryable_statuses: frozenset = RETRYABLE_STATUS_CODES,
):
    """Call fn() with exponential backoff on retryable HTTP status codes.

    fn must return an httpx.Response. Only transport errors are retried on
    the exception path; anything else propagates immediately.
    Raises the last exception if all retries are exhausted.
    """
    last_exc: Optional[Exception] = None
    for attempt in range(retries + 1):
        try:
            resp = fn()
            if resp.status_code not in retryable_statuses:
                return resp
            if attempt < retries:
                time.sleep(backoff_base * (2 ** attempt))
                continue
            return resp
        except httpx.TransportError as e:
            last_exc = e
            if attempt < retries:
                time.sleep(backoff_base * (2 ** attempt))
                continue
            raise
    raise last_exc  # type: ignore[misc]


def format_request_log(
    log_format: str,
    *,
    request_id: str,
    method: str,
    path: str,
    status: int,
    elapsed_ms: int,
) -> str:
    """Render one request log line. Metadata only, never bodies or credentials."""
    if log_format == "json":
        event: Dict[str, Any] = {
            "ts": datetime.datetime.now(datetime.timezone.utc).isoformat(),
            "level": "INFO",
            "request_id": request_id,
            "method": method,
            "path": path,
            "status": status,
            "elapsed_ms": elapsed_ms,
        }
        return json.dumps(event, separators=(",", ":"))
    return "request_id=%s method=%s path=%s status=%d elapsed_ms=%d" % (
        request_id,
        method,
        path,
        status,
        elapsed_ms,
    )
