"""Structured exceptions for the Langfuse gateway."""

from __future__ import annotations

from typing import Any, Optional


class ApiError(Exception):
    """Base exception for all Langfuse API errors.

    ``message`` is always the remote-provided text, unmodified. Callers match
    on substrings of it, so it must never be rewritten or generalized.
    """

    def __init__(
        self,
        status_code: int,
        message: str,
        detail: Any = None,
        request_id: Optional[str] = None,
    ) -> None:
        self.status_code = status_code
        self.message = message
        self.detail = detail
        self.request_id = request_id
        super().__init__(f"[{status_code}] {message}")


class AuthError(ApiError):
    """401 Unauthorized: missing or invalid credentials."""
    pass


class ForbiddenError(ApiError):
    """403 Forbidden: credential lacks the required scope."""
    pass


class ValidationError(ApiError):
    """400 / 422: the remote rejected the request body."""
    pass


class NotFoundError(ApiError):
    """404 Not Found, or a list-and-match lookup without a match."""
    pass


class ConflictError(ApiError):
    """409 Conflict: e.g. an identity that already exists account-wide."""
    pass


class RateLimitedError(ApiError):
    """429 Too Many Requests."""
    pass


class ServerError(ApiError):
    """500+: server-side error."""
    pass


class RemoteOperationError(ApiError):
    """2xx response whose envelope reports ``success=false``."""
    pass


class DecodeError(ApiError):
    """2xx response whose body is not valid JSON or does not match the expected shape.

    ``detail`` carries the raw response text.
    """
    pass


class TransportError(ApiError):
    """The HTTP exchange itself failed (connection, timeout, protocol)."""

    def __init__(self, method: str, path: str, cause: Exception) -> None:
        self.method = method
        self.path = path
        self.cause = cause
        super().__init__(0, f"{method} {path} failed: {cause}")


class MissingCredentialsError(Exception):
    """A gateway was requested without the credentials it needs."""
    pass
