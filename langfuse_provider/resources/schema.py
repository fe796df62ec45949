"""Attribute schema declared by each resource kind."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from langfuse_provider.resources.diagnostics import Diagnostics


@dataclass(frozen=True)
class Attribute:
    """One attribute of a resource.

    ``required``/``optional`` attributes come from declared configuration,
    ``computed`` ones are filled from the remote. ``requires_replace`` marks
    attributes whose change means a different remote object.
    """

    name: str
    type: str = "string"
    description: str = ""
    required: bool = False
    optional: bool = False
    computed: bool = False
    sensitive: bool = False
    requires_replace: bool = False


@dataclass(frozen=True)
class Schema:
    attributes: List[Attribute]
    description: str = ""
    _index: Dict[str, Attribute] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_index", {a.name: a for a in self.attributes})

    @property
    def sensitive_names(self) -> List[str]:
        return [a.name for a in self.attributes if a.sensitive]

    def validate_config(self, config: Mapping[str, Any]) -> Diagnostics:
        """Check declared configuration against required and known attributes."""
        diags = Diagnostics()
        for name in config:
            attr = self._index.get(name)
            if attr is None or (attr.computed and not (attr.required or attr.optional)):
                diags.add_error("Unsupported attribute", f"{name!r} cannot be set in configuration")
        for attr in self.attributes:
            if attr.required and config.get(attr.name) in (None, ""):
                diags.add_error("Missing required attribute", f"{attr.name!r} must be set")
        return diags

    def replacement_attributes(
        self, plan: Mapping[str, Any], state: Optional[Mapping[str, Any]]
    ) -> List[str]:
        """Force-replace attributes whose planned value differs from state."""
        if state is None:
            return []
        return [
            a.name
            for a in self.attributes
            if a.requires_replace and a.name in plan and plan[a.name] != state.get(a.name)
        ]
