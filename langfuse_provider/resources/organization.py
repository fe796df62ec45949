"""langfuse_organization: organizations managed with the admin key."""

from __future__ import annotations

import logging
from typing import Dict, Optional

from pydantic import BaseModel

from langfuse_provider.client.errors import ApiError, NotFoundError
from langfuse_provider.client.models import (
    CreateOrganizationRequest,
    Organization,
    UpdateOrganizationRequest,
)
from langfuse_provider.resources.base import Resource, ResourceResponse, metadata_or_none
from langfuse_provider.resources.diagnostics import Diagnostics
from langfuse_provider.resources.schema import Attribute, Schema

logger = logging.getLogger("langfuse_provider.resources")

# Remote refuses to delete organizations that still own projects.
EXISTING_PROJECTS_MARKER = "existing projects"


class OrganizationModel(BaseModel):
    id: str = ""
    name: str = ""
    metadata: Optional[Dict[str, str]] = None


def _to_model(org: Organization) -> OrganizationModel:
    return OrganizationModel(id=org.id, name=org.name, metadata=metadata_or_none(org.metadata))


class OrganizationResource(Resource[OrganizationModel]):
    type_suffix = "_organization"
    model = OrganizationModel

    def schema(self) -> Schema:
        return Schema(
            description="Manages a Langfuse organization. Requires the admin API key.",
            attributes=[
                Attribute("id", computed=True, description="The organization ID."),
                Attribute("name", required=True, description="The display name of the organization."),
                Attribute(
                    "metadata",
                    type="map(string)",
                    optional=True,
                    description="Metadata for the organization as key-value pairs.",
                ),
            ],
        )

    def create(self, plan: OrganizationModel) -> ResourceResponse[OrganizationModel]:
        diags = Diagnostics()
        admin = self._admin_client(diags)
        if admin is None:
            return ResourceResponse(diagnostics=diags)
        try:
            org = admin.create_organization(
                CreateOrganizationRequest(name=plan.name, metadata=dict(plan.metadata or {}))
            )
        except ApiError as e:
            diags.add_error("Error creating organization", str(e))
            return ResourceResponse(diagnostics=diags)
        return ResourceResponse(state=_to_model(org), diagnostics=diags)

    def read(self, state: OrganizationModel) -> ResourceResponse[OrganizationModel]:
        diags = Diagnostics()
        admin = self._admin_client(diags)
        if admin is None:
            return ResourceResponse(diagnostics=diags)
        try:
            org = admin.get_organization(state.id)
        except NotFoundError:
            logger.info("organization %s no longer exists; dropping from state", state.id)
            return ResourceResponse(diagnostics=diags, removed=True)
        except ApiError as e:
            diags.add_error("Error reading organization", f"Organization {state.id}: {e}")
            return ResourceResponse(diagnostics=diags)
        return ResourceResponse(state=_to_model(org), diagnostics=diags)

    def update(
        self, plan: OrganizationModel, state: OrganizationModel
    ) -> ResourceResponse[OrganizationModel]:
        diags = Diagnostics()
        admin = self._admin_client(diags)
        if admin is None:
            return ResourceResponse(diagnostics=diags)
        # The ID lives only in the previous record, never in configuration.
        try:
            org = admin.update_organization(
                state.id,
                UpdateOrganizationRequest(name=plan.name, metadata=dict(plan.metadata or {})),
            )
        except ApiError as e:
            diags.add_error("Error updating organization", f"Organization {state.id}: {e}")
            return ResourceResponse(diagnostics=diags)
        return ResourceResponse(state=_to_model(org), diagnostics=diags)

    def delete(self, state: OrganizationModel) -> ResourceResponse[OrganizationModel]:
        diags = Diagnostics()
        admin = self._admin_client(diags)
        if admin is None:
            return ResourceResponse(diagnostics=diags)
        try:
            admin.delete_organization(state.id)
        except ApiError as e:
            if EXISTING_PROJECTS_MARKER not in e.message:
                diags.add_error("Error deleting organization", f"Organization {state.id}: {e}")
                return ResourceResponse(diagnostics=diags)
            # Teardown order across independently tracked resources is not
            # guaranteed; lingering projects are reported, not fatal.
            logger.warning("organization %s still has projects; delete skipped", state.id)
            diags.add_warning(
                "Organization deletion skipped",
                "Organization still has existing projects. Remove them to complete the "
                f"deletion. Error: {e}",
            )
        return ResourceResponse(state=None, diagnostics=diags)

    def import_state(self, import_id: str) -> ResourceResponse[OrganizationModel]:
        diags = Diagnostics()
        admin = self._admin_client(diags)
        if admin is None:
            return ResourceResponse(diagnostics=diags)
        try:
            org = admin.get_organization(import_id)
        except ApiError as e:
            diags.add_error("Error importing organization", f"Could not read organization {import_id}: {e}")
            return ResourceResponse(diagnostics=diags)
        return ResourceResponse(state=_to_model(org), diagnostics=diags)
