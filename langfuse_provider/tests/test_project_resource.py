"""Project resource: write-only retention, credentials and imports."""

from __future__ import annotations

import pytest

from langfuse_provider.client.errors import ServerError
from langfuse_provider.resources.project import ProjectModel, ProjectResource


@pytest.fixture
def resource(factory):
    r = ProjectResource()
    r.configure(factory)
    return r


@pytest.fixture
def plan(org_keys):
    org_id, public_key, secret_key = org_keys
    return ProjectModel(
        name="Web",
        retention_days=30,
        metadata={"team": "growth"},
        organization_id=org_id,
        organization_public_key=public_key,
        organization_private_key=secret_key,
    )


@pytest.fixture
def created(resource, plan):
    response = resource.create(plan)
    assert not response.diagnostics.has_error()
    return response.state


class TestProjectLifecycle:
    def test_create(self, fake, plan, created) -> None:
        assert created.id.startswith("proj-")
        assert created.name == "Web"
        assert created.retention_days == 30
        assert created.metadata == {"team": "growth"}
        assert created.organization_id == plan.organization_id
        assert created.organization_private_key == plan.organization_private_key
        assert fake.projects[created.id]["retention"] == 30

    def test_unset_retention_sent_as_zero_and_recorded_unset(self, fake, resource, plan) -> None:
        state = resource.create(plan.model_copy(update={"retention_days": None, "metadata": None})).state
        assert state.retention_days is None
        assert state.metadata is None
        assert fake.projects[state.id]["retention"] == 0

    def test_read_keeps_recorded_retention(self, fake, resource, created) -> None:
        """The list endpoint never reports retention; the recorded value survives reads."""
        fake.projects[created.id]["name"] = "Web (renamed)"
        response = resource.read(created)
        assert response.state.name == "Web (renamed)"
        assert response.state.retention_days == 30
        assert response.state.organization_public_key == created.organization_public_key

    def test_read_missing_signals_removal(self, fake, resource, created) -> None:
        del fake.projects[created.id]
        response = resource.read(created)
        assert response.removed is True
        assert not response.diagnostics

    def test_update_is_full_replace(self, fake, resource, created) -> None:
        planned = created.model_copy(update={"name": "Web v2", "retention_days": 7, "metadata": None})
        response = resource.update(planned, created)
        assert response.state.name == "Web v2"
        assert response.state.retention_days == 7
        assert response.state.metadata is None
        assert fake.projects[created.id]["retention"] == 7
        assert fake.projects[created.id]["metadata"] == {}

    def test_update_falls_back_to_recorded_credentials(self, resource, created) -> None:
        planned = ProjectModel(name="Web v3", retention_days=30, organization_id=created.organization_id)
        response = resource.update(planned, created)
        assert not response.diagnostics.has_error()
        assert response.state.organization_public_key == created.organization_public_key
        assert response.state.organization_private_key == created.organization_private_key

    def test_delete(self, fake, resource, created) -> None:
        response = resource.delete(created)
        assert not response.diagnostics
        assert response.state is None
        assert created.id not in fake.projects

    def test_delete_missing_is_an_error(self, fake, resource, created) -> None:
        del fake.projects[created.id]
        response = resource.delete(created)
        assert [d.summary for d in response.diagnostics.errors] == ["Error deleting project"]

    def test_wrong_credentials(self, resource, plan) -> None:
        response = resource.create(plan.model_copy(update={"organization_private_key": "sk-wrong"}))
        [error] = response.diagnostics.errors
        assert error.summary == "Error creating project"
        assert "[401]" in error.detail

    def test_missing_credentials_make_no_calls(self, fake, resource) -> None:
        before = len(fake.requests)
        response = resource.create(ProjectModel(name="Web", organization_id="org-1"))
        assert [d.summary for d in response.diagnostics.errors] == ["Missing organization credentials"]
        assert len(fake.requests) == before

    def test_read_server_error_is_not_removal(self, mock_factory, org_client) -> None:
        org_client.get_project.side_effect = ServerError(500, "boom")
        resource = ProjectResource()
        resource.configure(mock_factory)
        response = resource.read(ProjectModel(id="p1", organization_public_key="pk", organization_private_key="sk"))
        assert response.removed is False
        assert [d.summary for d in response.diagnostics.errors] == ["Error reading project"]


class TestProjectImport:
    def test_import(self, resource, created) -> None:
        import_id = ",".join(
            [created.id, created.organization_id, created.organization_public_key, created.organization_private_key]
        )
        response = resource.import_state(import_id)
        assert not response.diagnostics.has_error()
        state = response.state
        assert state.id == created.id
        assert state.name == "Web"
        assert state.retention_days == 0
        assert state.organization_id == created.organization_id
        assert state.organization_private_key == created.organization_private_key

    @pytest.mark.parametrize("import_id", ["proj-1", "proj-1,org-1,pk", "a,b,c,d,e"])
    def test_bad_format_makes_no_calls(self, fake, resource, import_id) -> None:
        before = len(fake.requests)
        response = resource.import_state(import_id)
        [error] = response.diagnostics.errors
        assert error.summary == "Invalid import format"
        assert error.detail == (
            "Import ID must be in format: "
            "project_id,organization_id,organization_public_key,organization_private_key"
        )
        assert len(fake.requests) == before

    def test_unknown_project_is_an_error(self, resource, org_keys) -> None:
        org_id, public_key, secret_key = org_keys
        response = resource.import_state(f"proj-missing,{org_id},{public_key},{secret_key}")
        assert response.removed is False
        assert response.state is None
        [error] = response.diagnostics.errors
        assert error.summary == "Error importing project"
        assert "cannot find project with ID proj-missing" in error.detail
