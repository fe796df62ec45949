"""OrganizationClient: calls authenticated with an organization's scoped key pair."""

from __future__ import annotations

from typing import List, Optional

import httpx

from langfuse_provider.client.auth import build_scoped_auth
from langfuse_provider.client.base import BaseClient
from langfuse_provider.client.errors import NotFoundError, RemoteOperationError
from langfuse_provider.client.models import (
    CreateProjectRequest,
    MembershipList,
    OperationResult,
    OrganizationMembership,
    Project,
    ProjectApiKey,
    ProjectApiKeyList,
    ProjectList,
    ScimUser,
    ScimUserRequest,
    UpdateMembershipRequest,
    UpdateProjectRequest,
)

_REMOVAL_ACKNOWLEDGEMENTS = ("deleted", "removed")


def removal_acknowledged(result: OperationResult) -> bool:
    """True when a member-removal envelope reports success.

    The remote sets ``success=false`` on this path even when the removal went
    through, so the free-text message is consulted as well.
    """
    if result.success:
        return True
    message = result.message.lower()
    return any(word in message for word in _REMOVAL_ACKNOWLEDGEMENTS)


class OrganizationClient(BaseClient):
    """Gateway for ``api/public/*`` endpoints, scoped to one organization."""

    def __init__(self, http_client: httpx.Client, public_key: str, private_key: str, **kwargs) -> None:
        super().__init__(http_client, **kwargs)
        self._public_key = public_key
        self._private_key = private_key

    def _auth(self) -> Optional[httpx.Auth]:
        return build_scoped_auth(self._public_key, self._private_key)

    # ── Projects ─────────────────────────────────────────────────

    def list_projects(self) -> List[Project]:
        """GET /api/public/organizations/projects"""
        resp = self._request("GET", "/api/public/organizations/projects")
        return self._decode(resp, ProjectList).projects

    def get_project(self, project_id: str) -> Project:
        # The list endpoint omits retentionDays, so it always decodes as 0.
        for project in self.list_projects():
            if project.id == project_id:
                return project
        raise NotFoundError(404, f"cannot find project with ID {project_id}")

    def create_project(self, request: CreateProjectRequest) -> Project:
        """POST /api/public/projects"""
        resp = self._request(
            "POST", "/api/public/projects", json=request.model_dump(by_alias=True, exclude_none=True)
        )
        return self._decode(resp, Project)

    def update_project(self, project_id: str, request: UpdateProjectRequest) -> Project:
        """PUT /api/public/projects/{id}"""
        resp = self._request(
            "PUT",
            f"/api/public/projects/{project_id}",
            json=request.model_dump(by_alias=True, exclude_none=True),
        )
        return self._decode(resp, Project)

    def delete_project(self, project_id: str) -> None:
        """DELETE /api/public/projects/{id}"""
        resp = self._request("DELETE", f"/api/public/projects/{project_id}")
        self._expect_success(resp, f"failed to delete project with ID {project_id}")

    # ── Project API keys ─────────────────────────────────────────

    def list_project_api_keys(self, project_id: str) -> List[ProjectApiKey]:
        """GET /api/public/projects/{id}/apiKeys"""
        resp = self._request("GET", f"/api/public/projects/{project_id}/apiKeys")
        return self._decode(resp, ProjectApiKeyList).api_keys

    def get_project_api_key(self, project_id: str, api_key_id: str) -> ProjectApiKey:
        for key in self.list_project_api_keys(project_id):
            if key.id == api_key_id:
                return key
        raise NotFoundError(404, f"cannot find API key with ID {api_key_id} in project {project_id}")

    def create_project_api_key(self, project_id: str) -> ProjectApiKey:
        """POST /api/public/projects/{id}/apiKeys"""
        resp = self._request("POST", f"/api/public/projects/{project_id}/apiKeys")
        return self._decode(resp, ProjectApiKey)

    def delete_project_api_key(self, project_id: str, api_key_id: str) -> None:
        """DELETE /api/public/projects/{id}/apiKeys/{key_id}"""
        resp = self._request("DELETE", f"/api/public/projects/{project_id}/apiKeys/{api_key_id}")
        self._expect_success(
            resp, f"failed to delete API key with ID {api_key_id} in project {project_id}"
        )

    # ── Memberships ──────────────────────────────────────────────

    def list_memberships(self) -> List[OrganizationMembership]:
        """GET /api/public/organizations/memberships"""
        resp = self._request("GET", "/api/public/organizations/memberships")
        return self._decode(resp, MembershipList).memberships

    def get_membership(self, membership_id: str) -> OrganizationMembership:
        for membership in self.list_memberships():
            # The id field is often missing; user ids are accepted too.
            if membership_id and membership_id in (membership.id, membership.user_id):
                return membership
        raise NotFoundError(404, f"cannot find membership with ID {membership_id}")

    def update_membership(
        self, membership_id: str, request: UpdateMembershipRequest
    ) -> OrganizationMembership:
        """PUT /api/public/organizations/memberships

        Looks the membership up first so the PUT always carries a user id.
        """
        current = self.get_membership(membership_id)
        body = UpdateMembershipRequest(
            user_id=request.user_id or current.user_id,
            role=request.role,
        )
        resp = self._request(
            "PUT",
            "/api/public/organizations/memberships",
            json=body.model_dump(by_alias=True, exclude_none=True),
        )
        updated = self._decode(resp, OrganizationMembership)
        if not updated.id:
            updated.id = membership_id
        return updated

    def remove_member(self, user_id: str) -> None:
        """DELETE /api/public/organizations/memberships

        Removes the organization binding only; the user account survives.
        """
        resp = self._request(
            "DELETE", "/api/public/organizations/memberships", json={"userId": user_id}
        )
        result = self._decode(resp, OperationResult, allow_empty=True)
        if not removal_acknowledged(result):
            raise RemoteOperationError(
                resp.status_code,
                f"failed to remove member with ID {user_id}: {result.message}",
                result.model_dump(),
                resp.headers.get("x-request-id"),
            )

    # ── Identities (SCIM) ────────────────────────────────────────

    def create_scim_user(self, request: ScimUserRequest) -> ScimUser:
        """POST /api/public/scim/Users: the account is always created active."""
        body = request.model_copy(update={"active": True})
        resp = self._request(
            "POST", "/api/public/scim/Users", json=body.model_dump(by_alias=True, exclude_none=True)
        )
        return self._decode(resp, ScimUser)
