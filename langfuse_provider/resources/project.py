"""langfuse_project: projects managed with an organization's scoped key pair.

``retention_days`` is write-only on the remote: it is accepted on create and
update but the list endpoint used for reads never returns it. Reads therefore
keep the value from the previous record, and imports record 0.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional

from pydantic import BaseModel, Field

from langfuse_provider.client.errors import ApiError, NotFoundError
from langfuse_provider.client.models import CreateProjectRequest, Project, UpdateProjectRequest
from langfuse_provider.resources.base import Resource, ResourceResponse, metadata_or_none
from langfuse_provider.resources.diagnostics import Diagnostics
from langfuse_provider.resources.ids import ImportFormatError, split_import_id
from langfuse_provider.resources.schema import Attribute, Schema

logger = logging.getLogger("langfuse_provider.resources")

IMPORT_FIELDS = ["project_id", "organization_id", "organization_public_key", "organization_private_key"]

# Recorded on import, since the remote cannot report the real value.
IMPORTED_RETENTION_DAYS = 0


class ProjectModel(BaseModel):
    id: str = ""
    name: str = ""
    retention_days: Optional[int] = None
    metadata: Optional[Dict[str, str]] = None
    organization_id: str = ""
    organization_public_key: str = Field(default="", repr=False)
    organization_private_key: str = Field(default="", repr=False)


def _to_model(
    project: Project,
    *,
    retention_days: Optional[int],
    organization_id: str,
    public_key: str,
    private_key: str,
) -> ProjectModel:
    return ProjectModel(
        id=project.id,
        name=project.name,
        retention_days=retention_days,
        metadata=metadata_or_none(project.metadata),
        organization_id=organization_id,
        organization_public_key=public_key,
        organization_private_key=private_key,
    )


class ProjectResource(Resource[ProjectModel]):
    type_suffix = "_project"
    model = ProjectModel

    def schema(self) -> Schema:
        return Schema(
            description="Manages a Langfuse project inside an organization.",
            attributes=[
                Attribute("id", computed=True, description="The project ID."),
                Attribute("name", required=True, description="The display name of the project."),
                Attribute(
                    "retention_days",
                    type="int32",
                    optional=True,
                    description=(
                        "The retention period for the project in days. If not set, or set with a "
                        "value of 0, data will be stored indefinitely."
                    ),
                ),
                Attribute(
                    "metadata",
                    type="map(string)",
                    optional=True,
                    description="Metadata for the project as key-value pairs.",
                ),
                Attribute(
                    "organization_id",
                    required=True,
                    requires_replace=True,
                    description="The ID of the organization that owns this project.",
                ),
                Attribute(
                    "organization_public_key",
                    required=True,
                    sensitive=True,
                    description="Organization public key to authenticate the call.",
                ),
                Attribute(
                    "organization_private_key",
                    required=True,
                    sensitive=True,
                    description="Organization private key to authenticate the call.",
                ),
            ],
        )

    def create(self, plan: ProjectModel) -> ResourceResponse[ProjectModel]:
        diags = Diagnostics()
        client = self._scoped_client(plan.organization_public_key, plan.organization_private_key, diags)
        if client is None:
            return ResourceResponse(diagnostics=diags)
        try:
            project = client.create_project(
                CreateProjectRequest(
                    name=plan.name,
                    retention_days=plan.retention_days or 0,
                    metadata=dict(plan.metadata or {}),
                )
            )
        except ApiError as e:
            diags.add_error("Error creating project", str(e))
            return ResourceResponse(diagnostics=diags)
        return ResourceResponse(
            state=_to_model(
                project,
                retention_days=plan.retention_days,
                organization_id=plan.organization_id,
                public_key=plan.organization_public_key,
                private_key=plan.organization_private_key,
            ),
            diagnostics=diags,
        )

    def read(self, state: ProjectModel) -> ResourceResponse[ProjectModel]:
        diags = Diagnostics()
        client = self._scoped_client(state.organization_public_key, state.organization_private_key, diags)
        if client is None:
            return ResourceResponse(diagnostics=diags)
        try:
            project = client.get_project(state.id)
        except NotFoundError:
            logger.info("project %s no longer exists; dropping from state", state.id)
            return ResourceResponse(diagnostics=diags, removed=True)
        except ApiError as e:
            diags.add_error("Error reading project", f"Project {state.id}: {e}")
            return ResourceResponse(diagnostics=diags)
        return ResourceResponse(
            state=_to_model(
                project,
                retention_days=state.retention_days,
                organization_id=state.organization_id,
                public_key=state.organization_public_key,
                private_key=state.organization_private_key,
            ),
            diagnostics=diags,
        )

    def update(self, plan: ProjectModel, state: ProjectModel) -> ResourceResponse[ProjectModel]:
        diags = Diagnostics()
        # Credentials not restated in the plan keep their recorded values.
        public_key = plan.organization_public_key or state.organization_public_key
        private_key = plan.organization_private_key or state.organization_private_key
        client = self._scoped_client(public_key, private_key, diags)
        if client is None:
            return ResourceResponse(diagnostics=diags)
        try:
            project = client.update_project(
                state.id,
                UpdateProjectRequest(
                    name=plan.name,
                    retention_days=plan.retention_days or 0,
                    metadata=dict(plan.metadata or {}),
                ),
            )
        except ApiError as e:
            diags.add_error("Error updating project", f"Project {state.id}: {e}")
            return ResourceResponse(diagnostics=diags)
        return ResourceResponse(
            state=_to_model(
                project,
                retention_days=plan.retention_days,
                organization_id=plan.organization_id or state.organization_id,
                public_key=public_key,
                private_key=private_key,
            ),
            diagnostics=diags,
        )

    def delete(self, state: ProjectModel) -> ResourceResponse[ProjectModel]:
        diags = Diagnostics()
        client = self._scoped_client(state.organization_public_key, state.organization_private_key, diags)
        if client is None:
            return ResourceResponse(diagnostics=diags)
        try:
            client.delete_project(state.id)
        except ApiError as e:
            diags.add_error("Error deleting project", f"Project {state.id}: {e}")
            return ResourceResponse(diagnostics=diags)
        return ResourceResponse(state=None, diagnostics=diags)

    def import_state(self, import_id: str) -> ResourceResponse[ProjectModel]:
        """Import from ``project_id,organization_id,organization_public_key,organization_private_key``."""
        diags = Diagnostics()
        try:
            project_id, organization_id, public_key, private_key = split_import_id(import_id, IMPORT_FIELDS)
        except ImportFormatError as e:
            diags.add_error("Invalid import format", str(e))
            return ResourceResponse(diagnostics=diags)

        client = self._scoped_client(public_key, private_key, diags)
        if client is None:
            return ResourceResponse(diagnostics=diags)
        try:
            project = client.get_project(project_id)
        except ApiError as e:
            diags.add_error("Error importing project", f"Could not read project {project_id}: {e}")
            return ResourceResponse(diagnostics=diags)
        return ResourceResponse(
            state=_to_model(
                project,
                retention_days=IMPORTED_RETENTION_DAYS,
                organization_id=organization_id,
                public_key=public_key,
                private_key=private_key,
            ),
            diagnostics=diags,
        )
