"""LangfuseProvider: provider-level configuration and the resource registry."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Tuple, Type

from langfuse_provider import __version__
from langfuse_provider.client.factory import ClientFactory
from langfuse_provider.resources import (
    OrganizationApiKeyResource,
    OrganizationMembershipResource,
    OrganizationResource,
    ProjectApiKeyResource,
    ProjectResource,
    Resource,
)
from langfuse_provider.resources.diagnostics import Diagnostics
from langfuse_provider.resources.schema import Attribute, Schema
from langfuse_provider.settings import ProviderSettings, load_settings

TYPE_NAME = "langfuse"

RESOURCE_CLASSES: List[Type[Resource]] = [
    OrganizationResource,
    OrganizationApiKeyResource,
    OrganizationMembershipResource,
    ProjectResource,
    ProjectApiKeyResource,
]


class LangfuseProvider:
    """Entry point the host talks to.

    Usage::

        provider = LangfuseProvider()
        provider.configure({"host": "https://cloud.langfuse.com"})
        projects = provider.resource("langfuse_project")
    """

    def __init__(self, version: str = __version__) -> None:
        self.version = version
        self.settings: Optional[ProviderSettings] = None
        self.client_factory: Optional[ClientFactory] = None

    def metadata(self) -> Tuple[str, str]:
        return TYPE_NAME, self.version

    def schema(self) -> Schema:
        return Schema(
            attributes=[
                Attribute(
                    "host",
                    optional=True,
                    description="Base URI of the Langfuse instance (defaults to https://app.langfuse.com).",
                ),
                Attribute(
                    "admin_api_key",
                    optional=True,
                    sensitive=True,
                    description=(
                        "Admin API key. Only needed when managing organizations. "
                        "Can also come from LANGFUSE_ADMIN_KEY."
                    ),
                ),
            ],
        )

    def configure(
        self, config: Optional[Mapping[str, Any]] = None, http_client: Any = None
    ) -> Diagnostics:
        """Resolve host and admin key (configuration > environment > default)."""
        config = dict(config or {})
        diags = self.schema().validate_config(config)
        if diags.has_error():
            return diags
        self.settings = load_settings(
            host=config.get("host"),
            admin_api_key=config.get("admin_api_key"),
        )
        self.client_factory = ClientFactory(
            host=self.settings.host,
            admin_api_key=self.settings.admin_api_key,
            timeout=self.settings.timeout,
            retries=self.settings.retries,
            log_format=self.settings.log_format,
            http_client=http_client,
        )
        return diags

    def resources(self) -> List[Type[Resource]]:
        return list(RESOURCE_CLASSES)

    def resource_types(self) -> Dict[str, Type[Resource]]:
        return {cls().metadata(TYPE_NAME): cls for cls in RESOURCE_CLASSES}

    def resource(self, type_name: str) -> Resource:
        """Instantiate and configure the resource registered under ``type_name``."""
        cls = self.resource_types().get(type_name)
        if cls is None:
            raise KeyError(f"unknown resource type {type_name!r}")
        instance = cls()
        instance.configure(self.client_factory)
        return instance

    def close(self) -> None:
        if self.client_factory is not None:
            self.client_factory.close()
