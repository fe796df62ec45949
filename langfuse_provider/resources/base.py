"""Resource interface shared by every managed kind.

A resource is a stateless translator: each operation takes a declared
configuration and/or the previous durable record, talks to the remote through
a gateway obtained from the injected ``ClientFactory``, and returns the new
record together with diagnostics. Instances hold nothing mutable besides the
factory, so distinct records may be processed concurrently.
"""

from __future__ import annotations

import abc
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Generic, Mapping, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as ModelValidationError

from langfuse_provider.client.admin import AdminClient
from langfuse_provider.client.errors import MissingCredentialsError
from langfuse_provider.client.factory import ClientFactory
from langfuse_provider.client.organization import OrganizationClient
from langfuse_provider.resources.diagnostics import Diagnostics
from langfuse_provider.resources.schema import Schema

ModelT = TypeVar("ModelT", bound=BaseModel)


@dataclass
class ResourceResponse(Generic[ModelT]):
    """Outcome of one lifecycle operation.

    ``removed`` tells the caller to drop the record from tracked state (the
    remote object is gone). ``state`` is None after delete and on errors.
    """

    state: Optional[ModelT] = None
    diagnostics: Diagnostics = field(default_factory=Diagnostics)
    removed: bool = False


def metadata_or_none(metadata: Optional[Dict[str, str]]) -> Optional[Dict[str, str]]:
    """Empty remote metadata is recorded as null rather than ``{}``."""
    return dict(metadata) if metadata else None


class Resource(abc.ABC, Generic[ModelT]):
    """Capability set: metadata, schema, configure, create, read, update, delete, import_state."""

    type_suffix: ClassVar[str]
    model: ClassVar[Type[BaseModel]]

    def __init__(self) -> None:
        self.client_factory: Optional[ClientFactory] = None

    def metadata(self, provider_type_name: str) -> str:
        return provider_type_name + self.type_suffix

    @abc.abstractmethod
    def schema(self) -> Schema:
        ...

    def configure(self, provider_data: Any) -> Diagnostics:
        diags = Diagnostics()
        if provider_data is None:
            return diags
        if not isinstance(provider_data, ClientFactory):
            diags.add_error(
                "Unexpected Resource Configure Type",
                f"Expected ClientFactory, got: {type(provider_data).__name__}. "
                "Please report this issue to the provider developers.",
            )
            return diags
        self.client_factory = provider_data
        return diags

    def parse_config(self, config: Mapping[str, Any]) -> Tuple[Optional[ModelT], Diagnostics]:
        """Validate declared configuration and build the record model from it."""
        diags = self.schema().validate_config(config)
        if diags.has_error():
            return None, diags
        try:
            return self.model.model_validate(dict(config)), diags  # type: ignore[return-value]
        except ModelValidationError as e:
            for err in e.errors():
                loc = ".".join(str(part) for part in err.get("loc", ()))
                diags.add_error("Invalid attribute value", f"{loc}: {err.get('msg', '')}")
            return None, diags

    def parse_state(self, state: Mapping[str, Any]) -> ModelT:
        return self.model.model_validate(dict(state))  # type: ignore[return-value]

    @abc.abstractmethod
    def create(self, plan: ModelT) -> ResourceResponse[ModelT]:
        ...

    @abc.abstractmethod
    def read(self, state: ModelT) -> ResourceResponse[ModelT]:
        ...

    @abc.abstractmethod
    def update(self, plan: ModelT, state: ModelT) -> ResourceResponse[ModelT]:
        ...

    @abc.abstractmethod
    def delete(self, state: ModelT) -> ResourceResponse[ModelT]:
        ...

    @abc.abstractmethod
    def import_state(self, import_id: str) -> ResourceResponse[ModelT]:
        ...

    # ── Gateway helpers ──────────────────────────────────────────

    def _factory(self, diags: Diagnostics) -> Optional[ClientFactory]:
        if self.client_factory is None:
            diags.add_error(
                "Unconfigured provider",
                "The resource was used before the provider was configured.",
            )
        return self.client_factory

    def _admin_client(self, diags: Diagnostics) -> Optional[AdminClient]:
        factory = self._factory(diags)
        if factory is None:
            return None
        try:
            return factory.for_admin()
        except MissingCredentialsError as e:
            diags.add_error("Missing admin API key", str(e))
            return None

    def _scoped_client(
        self, public_key: str, private_key: str, diags: Diagnostics
    ) -> Optional[OrganizationClient]:
        factory = self._factory(diags)
        if factory is None:
            return None
        try:
            return factory.for_scoped_keys(public_key, private_key)
        except MissingCredentialsError as e:
            diags.add_error("Missing organization credentials", str(e))
            return None
