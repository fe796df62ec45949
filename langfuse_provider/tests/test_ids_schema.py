"""Tests for identifier helpers, schema validation and diagnostics."""

from __future__ import annotations

import pytest

from langfuse_provider.resources.diagnostics import Diagnostics, Severity
from langfuse_provider.resources.ids import ImportFormatError, resolve_id, split_import_id
from langfuse_provider.resources.project import ProjectResource
from langfuse_provider.resources.schema import Attribute, Schema


class TestResolveId:
    def test_primary_wins(self) -> None:
        assert resolve_id("m-1", "u-1") == "m-1"

    @pytest.mark.parametrize("primary", ["", None])
    def test_fallback(self, primary) -> None:
        assert resolve_id(primary, "u-42") == "u-42"

    def test_both_empty(self) -> None:
        assert resolve_id(None, "") == ""


class TestSplitImportId:
    def test_exact_field_count(self) -> None:
        assert split_import_id("p1,o1,pk,sk", ["a", "b", "c", "d"]) == ["p1", "o1", "pk", "sk"]

    @pytest.mark.parametrize("import_id", ["p1", "p1,o1,pk", "p1,o1,pk,sk,extra"])
    def test_wrong_count_rejected(self, import_id) -> None:
        with pytest.raises(ImportFormatError) as excinfo:
            split_import_id(import_id, ["project_id", "organization_id", "pk", "sk"])
        assert str(excinfo.value) == "Import ID must be in format: project_id,organization_id,pk,sk"


class TestSchema:
    @pytest.fixture
    def schema(self):
        return Schema(
            attributes=[
                Attribute("id", computed=True),
                Attribute("name", required=True),
                Attribute("note", optional=True),
                Attribute("owner", required=True, requires_replace=True),
                Attribute("token", optional=True, sensitive=True),
            ]
        )

    def test_valid_config(self, schema) -> None:
        assert not schema.validate_config({"name": "a", "owner": "o", "note": "n"}).has_error()

    def test_missing_required(self, schema) -> None:
        diags = schema.validate_config({"name": "a"})
        assert [d.summary for d in diags.errors] == ["Missing required attribute"]
        assert "'owner'" in diags.errors[0].detail

    def test_empty_required_counts_as_missing(self, schema) -> None:
        assert schema.validate_config({"name": "", "owner": "o"}).has_error()

    def test_computed_and_unknown_rejected(self, schema) -> None:
        diags = schema.validate_config({"name": "a", "owner": "o", "id": "x", "colour": "red"})
        assert [d.summary for d in diags.errors] == ["Unsupported attribute", "Unsupported attribute"]

    def test_replacement_attributes(self, schema) -> None:
        state = {"name": "a", "owner": "o1"}
        assert schema.replacement_attributes({"name": "b", "owner": "o1"}, state) == []
        assert schema.replacement_attributes({"name": "a", "owner": "o2"}, state) == ["owner"]
        assert schema.replacement_attributes({"name": "a", "owner": "o2"}, None) == []

    def test_sensitive_names(self, schema) -> None:
        assert schema.sensitive_names == ["token"]

    def test_project_schema_sensitive_and_replace(self) -> None:
        schema = ProjectResource().schema()
        assert schema.sensitive_names == ["organization_public_key", "organization_private_key"]
        replaced = [a.name for a in schema.attributes if a.requires_replace]
        assert "organization_id" in replaced
        assert "name" not in replaced


class TestDiagnostics:
    def test_warning_is_not_error(self) -> None:
        diags = Diagnostics()
        diags.add_warning("Heads up", "detail")
        assert not diags.has_error()
        assert len(diags) == 1
        assert diags.warnings[0].severity is Severity.WARNING

    def test_keeps_order(self) -> None:
        diags = Diagnostics()
        diags.add_warning("one")
        diags.add_error("two")
        assert [d.summary for d in diags] == ["one", "two"]
        assert diags.has_error()
        assert str(diags.errors[0]) == "error: two"
