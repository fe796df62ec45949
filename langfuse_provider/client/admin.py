"""AdminClient: organization-level operations authenticated with the admin key."""

from __future__ import annotations

from typing import Dict, List

import httpx

from langfuse_provider.client.auth import build_admin_headers
from langfuse_provider.client.base import BaseClient
from langfuse_provider.client.errors import NotFoundError
from langfuse_provider.client.models import (
    CreateOrganizationRequest,
    Organization,
    OrganizationApiKey,
    OrganizationApiKeyList,
    UpdateOrganizationRequest,
)


class AdminClient(BaseClient):
    """Gateway for ``api/admin/*`` endpoints.

    Usage::

        admin = factory.for_admin()
        org = admin.create_organization(CreateOrganizationRequest(name="Acme"))
        key = admin.create_organization_api_key(org.id)
    """

    def __init__(self, http_client: httpx.Client, admin_api_key: str, **kwargs) -> None:
        super().__init__(http_client, **kwargs)
        self._admin_api_key = admin_api_key

    def _auth_headers(self) -> Dict[str, str]:
        return build_admin_headers(self._admin_api_key)

    # ── Organizations ────────────────────────────────────────────

    def create_organization(self, request: CreateOrganizationRequest) -> Organization:
        """POST /api/admin/organizations"""
        resp = self._request(
            "POST", "/api/admin/organizations", json=request.model_dump(by_alias=True, exclude_none=True)
        )
        return self._decode(resp, Organization)

    def get_organization(self, org_id: str) -> Organization:
        """GET /api/admin/organizations/{id}"""
        resp = self._request("GET", f"/api/admin/organizations/{org_id}")
        return self._decode(resp, Organization)

    def update_organization(self, org_id: str, request: UpdateOrganizationRequest) -> Organization:
        """PUT /api/admin/organizations/{id}: replaces name and metadata wholesale."""
        resp = self._request(
            "PUT",
            f"/api/admin/organizations/{org_id}",
            json=request.model_dump(by_alias=True, exclude_none=True),
        )
        return self._decode(resp, Organization)

    def delete_organization(self, org_id: str) -> None:
        """DELETE /api/admin/organizations/{id}

        Fails with the remote's message when the organization still owns projects.
        """
        self._request("DELETE", f"/api/admin/organizations/{org_id}")

    # ── Organization API keys ────────────────────────────────────

    def list_organization_api_keys(self, org_id: str) -> List[OrganizationApiKey]:
        """GET /api/admin/organizations/{id}/apiKeys"""
        resp = self._request("GET", f"/api/admin/organizations/{org_id}/apiKeys")
        return self._decode(resp, OrganizationApiKeyList).api_keys

    def get_organization_api_key(self, org_id: str, api_key_id: str) -> OrganizationApiKey:
        for key in self.list_organization_api_keys(org_id):
            if key.id == api_key_id:
                return key
        raise NotFoundError(
            404, f"cannot find API key with ID {api_key_id} in organization {org_id}"
        )

    def create_organization_api_key(self, org_id: str) -> OrganizationApiKey:
        """POST /api/admin/organizations/{id}/apiKeys: the only response carrying the secret."""
        resp = self._request("POST", f"/api/admin/organizations/{org_id}/apiKeys")
        return self._decode(resp, OrganizationApiKey)

    def delete_organization_api_key(self, org_id: str, api_key_id: str) -> None:
        """DELETE /api/admin/organizations/{id}/apiKeys/{key_id}"""
        resp = self._request("DELETE", f"/api/admin/organizations/{org_id}/apiKeys/{api_key_id}")
        self._expect_success(
            resp, f"failed to delete API key with ID {api_key_id} in organization {org_id}"
        )
