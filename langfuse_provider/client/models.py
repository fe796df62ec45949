"""Pydantic wire models for the Langfuse admin and public APIs.

Field aliases mirror the camelCase JSON the remote speaks; Python code uses
the snake_case names.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


# ── Organizations (admin API) ────────────────────────────────────

class Organization(_WireModel):
    id: str
    name: str
    metadata: Optional[Dict[str, str]] = None


class CreateOrganizationRequest(_WireModel):
    name: str
    metadata: Optional[Dict[str, str]] = None


class UpdateOrganizationRequest(_WireModel):
    name: str
    metadata: Optional[Dict[str, str]] = None


class OrganizationApiKey(_WireModel):
    id: str
    public_key: str = Field(default="", alias="publicKey")
    secret_key: str = Field(default="", alias="secretKey")
    display_secret_key: Optional[str] = Field(default=None, alias="displaySecretKey")
    note: Optional[str] = None


class OrganizationApiKeyList(_WireModel):
    api_keys: List[OrganizationApiKey] = Field(default_factory=list, alias="apiKeys")


# ── Projects (public API, org-scoped) ────────────────────────────

class Project(_WireModel):
    id: str
    name: str
    # Never returned by the list endpoint; the remote treats it as write-only.
    retention_days: int = Field(default=0, alias="retentionDays")
    metadata: Optional[Dict[str, str]] = None


class ProjectList(_WireModel):
    projects: List[Project] = Field(default_factory=list)


class CreateProjectRequest(_WireModel):
    name: str
    retention_days: int = Field(default=0, alias="retention")
    metadata: Optional[Dict[str, str]] = None


class UpdateProjectRequest(_WireModel):
    name: str
    retention_days: int = Field(default=0, alias="retention")
    metadata: Optional[Dict[str, str]] = None


class ProjectApiKey(_WireModel):
    id: str
    public_key: str = Field(default="", alias="publicKey")
    secret_key: str = Field(default="", alias="secretKey")
    display_secret_key: Optional[str] = Field(default=None, alias="displaySecretKey")
    note: Optional[str] = None


class ProjectApiKeyList(_WireModel):
    api_keys: List[ProjectApiKey] = Field(default_factory=list, alias="apiKeys")


# ── Memberships and identities ───────────────────────────────────

class OrganizationMembership(_WireModel):
    # Frequently absent in responses; see resources.ids.resolve_id.
    id: Optional[str] = None
    email: str = ""
    role: str = ""
    status: str = ""
    user_id: str = Field(default="", alias="userId")
    username: str = Field(default="", alias="username")


class MembershipList(_WireModel):
    memberships: List[OrganizationMembership] = Field(default_factory=list)


class UpdateMembershipRequest(_WireModel):
    role: str
    user_id: Optional[str] = Field(default=None, alias="userId")
    email: Optional[str] = None


class ScimEmail(_WireModel):
    value: str
    primary: bool = False


class ScimUserRequest(_WireModel):
    user_name: str = Field(alias="userName")
    emails: List[ScimEmail] = Field(default_factory=list)
    password: Optional[str] = None
    active: bool = True


class ScimUser(_WireModel):
    id: str
    user_name: str = Field(default="", alias="userName")
    emails: List[ScimEmail] = Field(default_factory=list)
    active: bool = True


# ── Envelopes ────────────────────────────────────────────────────

class OperationResult(_WireModel):
    """``{"success": ..., "message": ...}`` envelope returned by deletes.

    A missing ``success`` key decodes as False, as the remote's flag is absent
    on some paths.
    """

    success: bool = False
    message: str = ""
