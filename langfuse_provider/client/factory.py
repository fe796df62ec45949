"""ClientFactory: builds the right gateway for the credential an operation needs."""

from __future__ import annotations

from typing import Any, Optional

import httpx

from langfuse_provider.client.admin import AdminClient
from langfuse_provider.client.errors import MissingCredentialsError
from langfuse_provider.client.organization import OrganizationClient

DEFAULT_HOST = "https://app.langfuse.com"


class ClientFactory:
    """Hands out gateways over one shared HTTP connection pool.

    Admin credentials are provider-wide; scoped key pairs arrive with each
    resource, so scoped gateways are built per call. The factory itself is
    read-only after construction and safe to share across threads.

    Usage::

        factory = ClientFactory(host="https://cloud.langfuse.com", admin_api_key="...")
        org = factory.for_admin().get_organization("org-123")
        projects = factory.for_scoped_keys("pk-lf-...", "sk-lf-...").list_projects()
    """

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        admin_api_key: str = "",
        timeout: float = 30.0,
        retries: int = 0,
        log_format: str = "text",
        http_client: Optional[httpx.Client] = None,
    ) -> None:
        self._host = (host or DEFAULT_HOST).rstrip("/")
        self._admin_api_key = admin_api_key
        self._timeout = timeout
        self._retries = retries
        self._log_format = log_format
        self._owns_client = http_client is None
        self._http = http_client or httpx.Client(base_url=self._host, timeout=self._timeout)

    @property
    def host(self) -> str:
        return self._host

    @property
    def has_admin_key(self) -> bool:
        return bool(self._admin_api_key)

    def for_admin(self) -> AdminClient:
        if not self._admin_api_key:
            raise MissingCredentialsError(
                "No admin API key configured. Set admin_api_key or LANGFUSE_ADMIN_KEY."
            )
        return AdminClient(
            self._http,
            self._admin_api_key,
            retries=self._retries,
            log_format=self._log_format,
        )

    def for_scoped_keys(self, public_key: str, private_key: str) -> OrganizationClient:
        if not public_key or not private_key:
            raise MissingCredentialsError(
                "Both organization_public_key and organization_private_key are required."
            )
        return OrganizationClient(
            self._http,
            public_key,
            private_key,
            retries=self._retries,
            log_format=self._log_format,
        )

    def close(self) -> None:
        if self._owns_client:
            self._http.close()

    def __enter__(self) -> ClientFactory:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"ClientFactory(host={self._host!r}, "
            f"admin_api_key={'***' if self._admin_api_key else ''!r}, "
            f"timeout={self._timeout}, retries={self._retries})"
        )
