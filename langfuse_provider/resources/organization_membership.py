"""langfuse_organization_membership: binds a user (by email) to an organization with a role.

The remote offers no lookup by email, only a list of the organization's
memberships. Creating a membership for an unknown email therefore takes
several calls:

1. list memberships and look for the email;
2. if absent, create the user through SCIM (which adds it to the
   organization at a default role) and list again to find its membership
   by user id;
3. set the declared role on the membership found.

Membership IDs are frequently missing from remote responses, so the record's
ID falls back to the user ID. Deleting a membership removes the binding only;
the user account outlives it.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from pydantic import BaseModel, Field

from langfuse_provider.client.errors import ApiError, NotFoundError
from langfuse_provider.client.models import (
    OrganizationMembership,
    ScimEmail,
    ScimUserRequest,
    UpdateMembershipRequest,
)
from langfuse_provider.client.organization import OrganizationClient
from langfuse_provider.resources.base import Resource, ResourceResponse
from langfuse_provider.resources.diagnostics import Diagnostics
from langfuse_provider.resources.ids import resolve_id
from langfuse_provider.resources.schema import Attribute, Schema

logger = logging.getLogger("langfuse_provider.resources")

VALID_ROLES = ("OWNER", "ADMIN", "MEMBER", "VIEWER")


class MembershipWorkflowError(Exception):
    """A step of the provisioning workflow failed."""

    def __init__(self, summary: str, detail: str) -> None:
        self.summary = summary
        self.detail = detail
        super().__init__(f"{summary}: {detail}")


class OrganizationMembershipModel(BaseModel):
    id: str = ""
    email: str = ""
    role: str = ""
    status: str = ""
    user_id: str = ""
    username: str = ""
    organization_public_key: str = Field(default="", repr=False)
    organization_private_key: str = Field(default="", repr=False)


def validate_role(role: str, diags: Diagnostics) -> bool:
    if role in VALID_ROLES:
        return True
    diags.add_error("Invalid Role", f"Role must be one of: {', '.join(VALID_ROLES)}. Got: {role}")
    return False


def _find(memberships: Iterable[OrganizationMembership], **match: str) -> Optional[OrganizationMembership]:
    for membership in memberships:
        if all(getattr(membership, k) == v for k, v in match.items()):
            return membership
    return None


def provision_membership(client: OrganizationClient, email: str, role: str) -> OrganizationMembership:
    """Ensure ``email`` is a member of the client's organization with ``role``.

    Exactly one role update is issued whether or not the user already
    belonged to the organization.
    """
    try:
        memberships = client.list_memberships()
    except ApiError as e:
        raise MembershipWorkflowError("Error listing current memberships", str(e)) from e

    existing = _find(memberships, email=email)
    if existing is not None:
        target_id = resolve_id(existing.id, existing.user_id)
        user_id = existing.user_id
    else:
        try:
            user = client.create_scim_user(
                ScimUserRequest(
                    user_name=email,
                    emails=[ScimEmail(value=email, primary=True)],
                    active=True,
                )
            )
        except ApiError as e:
            raise MembershipWorkflowError(
                "Error creating user via SCIM",
                f"Failed to create user with email {email}: {e}. "
                "User may already exist in Langfuse system.",
            ) from e
        logger.info("created user %s via SCIM", user.id)

        try:
            memberships = client.list_memberships()
        except ApiError as e:
            raise MembershipWorkflowError(
                "Error listing memberships after SCIM user creation", str(e)
            ) from e
        created = _find(memberships, user_id=user.id)
        if created is None:
            raise MembershipWorkflowError(
                "Error finding new membership",
                "User was created via SCIM but membership not found in organization. "
                f"UserID: {user.id}",
            )
        target_id = resolve_id(created.id, created.user_id)
        user_id = user.id

    try:
        return client.update_membership(
            target_id, UpdateMembershipRequest(user_id=user_id, role=role)
        )
    except ApiError as e:
        raise MembershipWorkflowError("Error updating membership role", str(e)) from e


def _to_model(
    membership: OrganizationMembership, previous: OrganizationMembershipModel
) -> OrganizationMembershipModel:
    return previous.model_copy(
        update={
            "id": resolve_id(membership.id, membership.user_id),
            "email": membership.email or previous.email,
            "role": membership.role,
            "status": membership.status,
            "user_id": membership.user_id,
            "username": membership.username,
        }
    )


class OrganizationMembershipResource(Resource[OrganizationMembershipModel]):
    type_suffix = "_organization_membership"
    model = OrganizationMembershipModel

    def schema(self) -> Schema:
        return Schema(
            description="Manages membership in a Langfuse organization.",
            attributes=[
                Attribute("id", computed=True, description="The unique identifier of the membership."),
                Attribute(
                    "email",
                    required=True,
                    requires_replace=True,
                    description="The email address of the user to invite.",
                ),
                Attribute(
                    "role",
                    required=True,
                    description=f"The role to assign to the user. Valid values are: {', '.join(VALID_ROLES)}.",
                ),
                Attribute("status", computed=True, description="The status of the membership invitation."),
                Attribute("user_id", computed=True, description="The unique identifier of the user."),
                Attribute("username", computed=True, description="The username of the user."),
                Attribute(
                    "organization_public_key",
                    required=True,
                    sensitive=True,
                    requires_replace=True,
                    description="Organization public key to authenticate the call.",
                ),
                Attribute(
                    "organization_private_key",
                    required=True,
                    sensitive=True,
                    requires_replace=True,
                    description="Organization private key to authenticate the call.",
                ),
            ],
        )

    def create(self, plan: OrganizationMembershipModel) -> ResourceResponse[OrganizationMembershipModel]:
        diags = Diagnostics()
        if not validate_role(plan.role, diags):
            return ResourceResponse(diagnostics=diags)
        client = self._scoped_client(plan.organization_public_key, plan.organization_private_key, diags)
        if client is None:
            return ResourceResponse(diagnostics=diags)
        try:
            membership = provision_membership(client, plan.email, plan.role)
        except MembershipWorkflowError as e:
            diags.add_error(e.summary, e.detail)
            return ResourceResponse(diagnostics=diags)
        return ResourceResponse(state=_to_model(membership, plan), diagnostics=diags)

    def read(self, state: OrganizationMembershipModel) -> ResourceResponse[OrganizationMembershipModel]:
        diags = Diagnostics()
        client = self._scoped_client(state.organization_public_key, state.organization_private_key, diags)
        if client is None:
            return ResourceResponse(diagnostics=diags)
        try:
            membership = client.get_membership(state.id)
        except NotFoundError:
            logger.info("membership %s no longer exists; dropping from state", state.id)
            return ResourceResponse(diagnostics=diags, removed=True)
        except ApiError as e:
            diags.add_error("Error reading membership", f"Membership {state.id}: {e}")
            return ResourceResponse(diagnostics=diags)
        return ResourceResponse(state=_to_model(membership, state), diagnostics=diags)

    def update(
        self, plan: OrganizationMembershipModel, state: OrganizationMembershipModel
    ) -> ResourceResponse[OrganizationMembershipModel]:
        diags = Diagnostics()
        if not validate_role(plan.role, diags):
            return ResourceResponse(diagnostics=diags)
        client = self._scoped_client(state.organization_public_key, state.organization_private_key, diags)
        if client is None:
            return ResourceResponse(diagnostics=diags)
        try:
            # The gateway re-resolves the user id from the current membership.
            membership = client.update_membership(state.id, UpdateMembershipRequest(role=plan.role))
        except ApiError as e:
            diags.add_error("Error updating membership", f"Membership {state.id}: {e}")
            return ResourceResponse(diagnostics=diags)
        return ResourceResponse(state=_to_model(membership, state), diagnostics=diags)

    def delete(self, state: OrganizationMembershipModel) -> ResourceResponse[OrganizationMembershipModel]:
        diags = Diagnostics()
        client = self._scoped_client(state.organization_public_key, state.organization_private_key, diags)
        if client is None:
            return ResourceResponse(diagnostics=diags)
        user_id = resolve_id(state.user_id, state.id)
        try:
            client.remove_member(user_id)
        except ApiError as e:
            diags.add_error("Error removing member", f"User {user_id}: {e}")
            return ResourceResponse(diagnostics=diags)
        return ResourceResponse(state=None, diagnostics=diags)

    def import_state(self, import_id: str) -> ResourceResponse[OrganizationMembershipModel]:
        """Record the bare ID; the next read resolves it against id or user_id."""
        return ResourceResponse(state=OrganizationMembershipModel(id=import_id))
