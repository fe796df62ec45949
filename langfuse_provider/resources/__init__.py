"""Resource adapters, one per managed Langfuse kind."""

from langfuse_provider.resources.base import Resource, ResourceResponse
from langfuse_provider.resources.diagnostics import Diagnostic, Diagnostics, Severity
from langfuse_provider.resources.organization import OrganizationModel, OrganizationResource
from langfuse_provider.resources.organization_api_key import (
    OrganizationApiKeyModel,
    OrganizationApiKeyResource,
)
from langfuse_provider.resources.organization_membership import (
    OrganizationMembershipModel,
    OrganizationMembershipResource,
)
from langfuse_provider.resources.project import ProjectModel, ProjectResource
from langfuse_provider.resources.project_api_key import ProjectApiKeyModel, ProjectApiKeyResource
from langfuse_provider.resources.schema import Attribute, Schema

__all__ = [
    "Attribute",
    "Diagnostic",
    "Diagnostics",
    "OrganizationApiKeyModel",
    "OrganizationApiKeyResource",
    "OrganizationMembershipModel",
    "OrganizationMembershipResource",
    "OrganizationModel",
    "OrganizationResource",
    "ProjectApiKeyModel",
    "ProjectApiKeyResource",
    "ProjectModel",
    "ProjectResource",
    "Resource",
    "ResourceResponse",
    "Schema",
    "Severity",
]
