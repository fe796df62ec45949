"""langfuse_organization_api_key: organization-scoped key pairs.

The secret half is returned only by the create call. Every later read keeps
the recorded secret; imports cannot recover it and record an empty string.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, Field

from langfuse_provider.client.errors import ApiError, NotFoundError
from langfuse_provider.resources.base import Resource, ResourceResponse
from langfuse_provider.resources.diagnostics import Diagnostics
from langfuse_provider.resources.ids import ImportFormatError, split_import_id
from langfuse_provider.resources.schema import Attribute, Schema

logger = logging.getLogger("langfuse_provider.resources")

IMPORT_FIELDS = ["organization_id", "api_key_id"]


class OrganizationApiKeyModel(BaseModel):
    id: str = ""
    organization_id: str = ""
    public_key: str = Field(default="", repr=False)
    secret_key: str = Field(default="", repr=False)


class OrganizationApiKeyResource(Resource[OrganizationApiKeyModel]):
    type_suffix = "_organization_api_key"
    model = OrganizationApiKeyModel

    def schema(self) -> Schema:
        return Schema(
            description="Manages an API key pair for a Langfuse organization. Requires the admin API key.",
            attributes=[
                Attribute("id", computed=True, description="The API key ID."),
                Attribute(
                    "organization_id",
                    required=True,
                    requires_replace=True,
                    description="The organization the key belongs to.",
                ),
                Attribute("public_key", computed=True, sensitive=True, description="The public key."),
                Attribute(
                    "secret_key",
                    computed=True,
                    sensitive=True,
                    description="The secret key. Only available after creation.",
                ),
            ],
        )

    def create(self, plan: OrganizationApiKeyModel) -> ResourceResponse[OrganizationApiKeyModel]:
        diags = Diagnostics()
        admin = self._admin_client(diags)
        if admin is None:
            return ResourceResponse(diagnostics=diags)
        try:
            key = admin.create_organization_api_key(plan.organization_id)
        except ApiError as e:
            diags.add_error(
                "Error creating organization API key", f"Organization {plan.organization_id}: {e}"
            )
            return ResourceResponse(diagnostics=diags)
        return ResourceResponse(
            state=OrganizationApiKeyModel(
                id=key.id,
                organization_id=plan.organization_id,
                public_key=key.public_key,
                secret_key=key.secret_key,
            ),
            diagnostics=diags,
        )

    def read(self, state: OrganizationApiKeyModel) -> ResourceResponse[OrganizationApiKeyModel]:
        diags = Diagnostics()
        admin = self._admin_client(diags)
        if admin is None:
            return ResourceResponse(diagnostics=diags)
        try:
            key = admin.get_organization_api_key(state.organization_id, state.id)
        except NotFoundError:
            logger.info("organization API key %s no longer exists; dropping from state", state.id)
            return ResourceResponse(diagnostics=diags, removed=True)
        except ApiError as e:
            diags.add_error("Error reading organization API key", f"API key {state.id}: {e}")
            return ResourceResponse(diagnostics=diags)
        return ResourceResponse(
            state=state.model_copy(update={"public_key": key.public_key or state.public_key}),
            diagnostics=diags,
        )

    def update(
        self, plan: OrganizationApiKeyModel, state: OrganizationApiKeyModel
    ) -> ResourceResponse[OrganizationApiKeyModel]:
        diags = Diagnostics()
        diags.add_error(
            "Update not supported",
            "Organization API keys are immutable; changing organization_id requires replacement.",
        )
        return ResourceResponse(diagnostics=diags)

    def delete(self, state: OrganizationApiKeyModel) -> ResourceResponse[OrganizationApiKeyModel]:
        diags = Diagnostics()
        admin = self._admin_client(diags)
        if admin is None:
            return ResourceResponse(diagnostics=diags)
        try:
            admin.delete_organization_api_key(state.organization_id, state.id)
        except ApiError as e:
            diags.add_error("Error deleting organization API key", f"API key {state.id}: {e}")
            return ResourceResponse(diagnostics=diags)
        return ResourceResponse(state=None, diagnostics=diags)

    def import_state(self, import_id: str) -> ResourceResponse[OrganizationApiKeyModel]:
        """Import from ``organization_id,api_key_id``."""
        diags = Diagnostics()
        try:
            organization_id, api_key_id = split_import_id(import_id, IMPORT_FIELDS)
        except ImportFormatError as e:
            diags.add_error("Invalid import format", str(e))
            return ResourceResponse(diagnostics=diags)

        admin = self._admin_client(diags)
        if admin is None:
            return ResourceResponse(diagnostics=diags)
        try:
            key = admin.get_organization_api_key(organization_id, api_key_id)
        except ApiError as e:
            diags.add_error(
                "Error importing organization API key", f"Could not read API key {api_key_id}: {e}"
            )
            return ResourceResponse(diagnostics=diags)
        return ResourceResponse(
            state=OrganizationApiKeyModel(
                id=key.id,
                organization_id=organization_id,
                public_key=key.public_key,
                secret_key="",
            ),
            diagnostics=diags,
        )
