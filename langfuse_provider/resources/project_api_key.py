"""langfuse_project_api_key: project key pairs.

Created and deleted with the owning organization's key pair; project keys on
their own cannot manage other project keys.
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

IMPORT_FIELDS = ["project_id", "api_key_id", "organization_public_key", "organization_private_key"]


class ProjectApiKeyModel(BaseModel):
    id: str = ""
    project_id: str = ""
    public_key: str = Field(default="", repr=False)
    secret_key: str = Field(default="", repr=False)
    organization_public_key: str = Field(default="", repr=False)
    organization_private_key: str = Field(default="", repr=False)


class ProjectApiKeyResource(Resource[ProjectApiKeyModel]):
    type_suffix = "_project_api_key"
    model = ProjectApiKeyModel

    def schema(self) -> Schema:
        return Schema(
            description="Manages an API key pair for a Langfuse project.",
            attributes=[
                Attribute("id", computed=True, description="Identifier of the API key."),
                Attribute(
                    "project_id",
                    required=True,
                    requires_replace=True,
                    description="ID of the project the key belongs to.",
                ),
                Attribute(
                    "public_key",
                    computed=True,
                    sensitive=True,
                    description="Public half of the key pair.",
                ),
                Attribute(
                    "secret_key",
                    computed=True,
                    sensitive=True,
                    description="Secret half of the key pair. Only returned on creation; empty after import.",
                ),
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

    def create(self, plan: ProjectApiKeyModel) -> ResourceResponse[ProjectApiKeyModel]:
        diags = Diagnostics()
        client = self._scoped_client(plan.organization_public_key, plan.organization_private_key, diags)
        if client is None:
            return ResourceResponse(diagnostics=diags)
        try:
            key = client.create_project_api_key(plan.project_id)
        except ApiError as e:
            diags.add_error("Error creating project API key", f"Project {plan.project_id}: {e}")
            return ResourceResponse(diagnostics=diags)
        return ResourceResponse(
            state=plan.model_copy(
                update={"id": key.id, "public_key": key.public_key, "secret_key": key.secret_key}
            ),
            diagnostics=diags,
        )

    def read(self, state: ProjectApiKeyModel) -> ResourceResponse[ProjectApiKeyModel]:
        diags = Diagnostics()
        client = self._scoped_client(state.organization_public_key, state.organization_private_key, diags)
        if client is None:
            return ResourceResponse(diagnostics=diags)
        try:
            key = client.get_project_api_key(state.project_id, state.id)
        except NotFoundError:
            logger.info("project API key %s no longer exists; dropping from state", state.id)
            return ResourceResponse(diagnostics=diags, removed=True)
        except ApiError as e:
            diags.add_error("Error reading project API key", f"API key {state.id}: {e}")
            return ResourceResponse(diagnostics=diags)
        return ResourceResponse(
            state=state.model_copy(update={"public_key": key.public_key or state.public_key}),
            diagnostics=diags,
        )

    def update(
        self, plan: ProjectApiKeyModel, state: ProjectApiKeyModel
    ) -> ResourceResponse[ProjectApiKeyModel]:
        diags = Diagnostics()
        diags.add_error(
            "Update not supported",
            "Project API keys are immutable; changing any attribute requires replacement.",
        )
        return ResourceResponse(diagnostics=diags)

    def delete(self, state: ProjectApiKeyModel) -> ResourceResponse[ProjectApiKeyModel]:
        diags = Diagnostics()
        client = self._scoped_client(state.organization_public_key, state.organization_private_key, diags)
        if client is None:
            return ResourceResponse(diagnostics=diags)
        try:
            client.delete_project_api_key(state.project_id, state.id)
        except ApiError as e:
            diags.add_error("Error deleting project API key", f"API key {state.id}: {e}")
            return ResourceResponse(diagnostics=diags)
        return ResourceResponse(state=None, diagnostics=diags)

    def import_state(self, import_id: str) -> ResourceResponse[ProjectApiKeyModel]:
        """Import from ``project_id,api_key_id,organization_public_key,organization_private_key``."""
        diags = Diagnostics()
        try:
            project_id, api_key_id, public_key, private_key = split_import_id(import_id, IMPORT_FIELDS)
        except ImportFormatError as e:
            diags.add_error("Invalid import format", str(e))
            return ResourceResponse(diagnostics=diags)

        client = self._scoped_client(public_key, private_key, diags)
        if client is None:
            return ResourceResponse(diagnostics=diags)
        try:
            key = client.get_project_api_key(project_id, api_key_id)
        except ApiError as e:
            diags.add_error("Error importing project API key", f"Could not read API key {api_key_id}: {e}")
            return ResourceResponse(diagnostics=diags)
        return ResourceResponse(
            state=ProjectApiKeyModel(
                id=key.id,
                project_id=project_id,
                public_key=key.public_key,
                secret_key="",
                organization_public_key=public_key,
                organization_private_key=private_key,
            ),
            diagnostics=diags,
        )
