"""HTTP gateway for the Langfuse admin and public APIs."""

from langfuse_provider.client.admin import AdminClient
from langfuse_provider.client.errors import (
    ApiError,
    AuthError,
    ConflictError,
    DecodeError,
    ForbiddenError,
    MissingCredentialsError,
    NotFoundError,
    RateLimitedError,
    RemoteOperationError,
    ServerError,
    TransportError,
    ValidationError,
)
from langfuse_provider.client.factory import DEFAULT_HOST, ClientFactory
from langfuse_provider.client.organization import OrganizationClient

__all__ = [
    "AdminClient",
    "OrganizationClient",
    "ClientFactory",
    "DEFAULT_HOST",
    "ApiError",
    "AuthError",
    "ConflictError",
    "DecodeError",
    "ForbiddenError",
    "MissingCredentialsError",
    "NotFoundError",
    "RateLimitedError",
    "RemoteOperationError",
    "ServerError",
    "TransportError",
    "ValidationError",
]
