"""Identifier helpers: fallback resolution and composite import IDs."""

from __future__ import annotations

from typing import List, Optional


class ImportFormatError(ValueError):
    """An import identifier does not have the expected shape."""

    def __init__(self, expected: str) -> None:
        self.expected = expected
        super().__init__(f"Import ID must be in format: {expected}")


def resolve_id(primary: Optional[str], fallback: Optional[str]) -> str:
    """Return ``primary`` when non-empty, else ``fallback`` (else "")."""
    return primary or fallback or ""


def split_import_id(import_id: str, fields: List[str]) -> List[str]:
    """Split a comma-joined import ID into exactly ``len(fields)`` parts.

    >>> split_import_id("p1,o1,pk,sk", ["project_id", "organization_id", "pk", "sk"])
    ['p1', 'o1', 'pk', 'sk']
    """
    parts = import_id.split(",")
    if len(parts) != len(fields):
        raise ImportFormatError(",".join(fields))
    return parts
