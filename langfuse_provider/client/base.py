"""Shared request plumbing for the admin and organization gateways."""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional, Type, TypeVar

import httpx
import pydantic

from langfuse_provider.client.errors import (
    ApiError,
    AuthError,
    ConflictError,
    DecodeError,
    ForbiddenError,
    NotFoundError,
    RateLimitedError,
    RemoteOperationError,
    ServerError,
    TransportError,
    ValidationError,
)
from langfuse_provider.client.models import OperationResult
from langfuse_provider.client.utils import format_request_log, generate_request_id, retry_with_backoff

logger = logging.getLogger("langfuse_provider.client")

ModelT = TypeVar("ModelT", bound=pydantic.BaseModel)


class BaseClient:
    """One authenticated view over a shared ``httpx.Client``.

    Subclasses decide how requests are authenticated; this class owns status
    classification, request IDs, logging and the opt-in GET retries.
    """

    def __init__(
        self,
        http_client: httpx.Client,
        *,
        retries: int = 0,
        log_format: str = "text",
    ) -> None:
        self._client = http_client
        self._retries = retries
        self._log_format = log_format

    # ── Internal helpers ─────────────────────────────────────────

    def _auth(self) -> Optional[httpx.Auth]:
        return None

    def _auth_headers(self) -> Dict[str, str]:
        return {}

    def _headers(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        headers: Dict[str, str] = {}
        if extra:
            headers.update(extra)
        if "x-request-id" not in {k.lower() for k in headers}:
            headers["X-Request-ID"] = generate_request_id()
        return headers

    def _raise_for_status(self, resp: httpx.Response, request_id: Optional[str] = None) -> None:
        if resp.status_code < 400:
            return
        request_id = resp.headers.get("x-request-id") or request_id
        try:
            body = resp.json()
        except ValueError:
            body = resp.text

        if isinstance(body, dict):
            err = body.get("error")
            if isinstance(err, dict):
                message = err.get("message", str(body))
            else:
                message = body.get("message") or err or body.get("detail") or str(body)
            if not isinstance(message, str):
                message = str(message)
        else:
            message = str(body) or resp.reason_phrase

        if resp.status_code == 401:
            raise AuthError(resp.status_code, message, body, request_id)
        if resp.status_code == 403:
            raise ForbiddenError(resp.status_code, message, body, request_id)
        if resp.status_code == 404:
            raise NotFoundError(resp.status_code, message, body, request_id)
        if resp.status_code == 409:
            raise ConflictError(resp.status_code, message, body, request_id)
        if resp.status_code in (400, 422):
            raise ValidationError(resp.status_code, message, body, request_id)
        if resp.status_code == 429:
            raise RateLimitedError(resp.status_code, message, body, request_id)
        if resp.status_code >= 500:
            raise ServerError(resp.status_code, message, body, request_id)
        raise ApiError(resp.status_code, message, body, request_id)

    def _request(
        self,
        method: str,
        path: str,
        *,
        json: Optional[Any] = None,
    ) -> httpx.Response:
        headers = self._headers(self._auth_headers())
        request_id = headers["X-Request-ID"]

        def do():
            return self._client.request(method, path, json=json, headers=headers, auth=self._auth())

        t0 = time.monotonic()
        try:
            # Only reads are safe to repeat.
            if method == "GET" and self._retries > 0:
                resp = retry_with_backoff(do, retries=self._retries)
            else:
                resp = do()
        except httpx.HTTPError as e:
            raise TransportError(method, path, e) from e

        elapsed_ms = int((time.monotonic() - t0) * 1000)
        logger.info(
            format_request_log(
                self._log_format,
                request_id=request_id,
                method=method,
                path=path,
                status=resp.status_code,
                elapsed_ms=elapsed_ms,
            )
        )
        self._raise_for_status(resp, request_id)
        return resp

    def _decode(self, resp: httpx.Response, model: Type[ModelT], *, allow_empty: bool = False) -> ModelT:
        """Parse a 2xx body into ``model``, or raise :class:`DecodeError`."""
        if allow_empty and not resp.content:
            return model.model_validate({})
        try:
            return model.model_validate(resp.json())
        except (ValueError, pydantic.ValidationError) as e:
            raise DecodeError(
                resp.status_code,
                f"unexpected response body from {resp.request.method} {resp.request.url.path}: {e}",
                resp.text,
                resp.headers.get("x-request-id") or resp.request.headers.get("x-request-id"),
            ) from e

    def _expect_success(self, resp: httpx.Response, failure: str) -> OperationResult:
        """Decode a success envelope and raise if it reports failure.

        The remote message is appended verbatim to ``failure``.
        """
        result = self._decode(resp, OperationResult, allow_empty=True)
        if not result.success:
            raise RemoteOperationError(
                resp.status_code,
                f"{failure}: {result.message}" if result.message else failure,
                result.model_dump(),
                resp.headers.get("x-request-id"),
            )
        return result
