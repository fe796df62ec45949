"""Organization membership resource and the provisioning workflow."""

from __future__ import annotations

import httpx
import pytest

from langfuse_provider.client.errors import ConflictError, NotFoundError, RemoteOperationError, ServerError
from langfuse_provider.client.factory import ClientFactory
from langfuse_provider.client.models import OrganizationMembership, ScimUser, UpdateMembershipRequest
from langfuse_provider.resources.organization_membership import (
    OrganizationMembershipModel,
    OrganizationMembershipResource,
)

ROLES_MESSAGE = "Role must be one of: OWNER, ADMIN, MEMBER, VIEWER. Got: SUPERUSER"


def _plan(email="a@x.io", role="ADMIN", public_key="pk", private_key="sk"):
    return OrganizationMembershipModel(
        email=email,
        role=role,
        organization_public_key=public_key,
        organization_private_key=private_key,
    )


@pytest.fixture
def resource(mock_factory):
    r = OrganizationMembershipResource()
    r.configure(mock_factory)
    return r


class TestProvisioning:
    def test_existing_member_gets_exactly_one_role_update(self, resource, org_client) -> None:
        org_client.list_memberships.return_value = [
            OrganizationMembership(user_id="u-42", email="a@x.io", role="MEMBER")
        ]
        org_client.update_membership.return_value = OrganizationMembership(
            user_id="u-42", email="a@x.io", role="ADMIN", status="ACTIVE"
        )

        response = resource.create(_plan())

        assert not response.diagnostics
        org_client.create_scim_user.assert_not_called()
        org_client.update_membership.assert_called_once_with(
            "u-42", UpdateMembershipRequest(user_id="u-42", role="ADMIN")
        )
        assert response.state.id == "u-42"
        assert response.state.user_id == "u-42"
        assert response.state.role == "ADMIN"
        assert response.state.status == "ACTIVE"
        assert response.state.organization_private_key == "sk"

    def test_existing_membership_id_preferred(self, resource, org_client) -> None:
        org_client.list_memberships.return_value = [
            OrganizationMembership(id="m-1", user_id="u-42", email="a@x.io", role="MEMBER")
        ]
        org_client.update_membership.return_value = OrganizationMembership(
            id="m-1", user_id="u-42", email="a@x.io", role="ADMIN"
        )
        response = resource.create(_plan())
        assert org_client.update_membership.call_args.args[0] == "m-1"
        assert response.state.id == "m-1"

    def test_new_user_provisioned_through_scim(self, resource, org_client) -> None:
        org_client.list_memberships.side_effect = [
            [OrganizationMembership(user_id="u-1", email="other@x.io", role="OWNER")],
            [
                OrganizationMembership(user_id="u-1", email="other@x.io", role="OWNER"),
                OrganizationMembership(user_id="u-7", email="n@x.io", role="NONE"),
            ],
        ]
        org_client.create_scim_user.return_value = ScimUser(id="u-7", user_name="n@x.io")
        org_client.update_membership.return_value = OrganizationMembership(
            user_id="u-7", email="n@x.io", role="VIEWER"
        )

        response = resource.create(_plan(email="n@x.io", role="VIEWER"))

        assert not response.diagnostics.has_error()
        [request] = org_client.create_scim_user.call_args.args
        assert request.user_name == "n@x.io"
        assert request.emails[0].value == "n@x.io"
        assert request.active is True
        org_client.update_membership.assert_called_once_with(
            "u-7", UpdateMembershipRequest(user_id="u-7", role="VIEWER")
        )
        assert response.state.id == "u-7"

    def test_scim_conflict(self, resource, org_client) -> None:
        org_client.list_memberships.return_value = []
        org_client.create_scim_user.side_effect = ConflictError(409, "User with this email already exists")

        response = resource.create(_plan(email="g@x.io"))

        [error] = response.diagnostics.errors
        assert error.summary == "Error creating user via SCIM"
        assert error.detail.startswith("Failed to create user with email g@x.io: [409]")
        assert error.detail.endswith("User may already exist in Langfuse system.")
        org_client.update_membership.assert_not_called()
        assert response.state is None

    def test_new_membership_not_found(self, resource, org_client) -> None:
        org_client.list_memberships.side_effect = [[], []]
        org_client.create_scim_user.return_value = ScimUser(id="u-7", user_name="n@x.io")

        response = resource.create(_plan(email="n@x.io"))

        [error] = response.diagnostics.errors
        assert error.summary == "Error finding new membership"
        assert "UserID: u-7" in error.detail
        org_client.update_membership.assert_not_called()

    @pytest.mark.parametrize(
        "failing_call, summary",
        [
            (0, "Error listing current memberships"),
            (1, "Error listing memberships after SCIM user creation"),
        ],
    )
    def test_listing_failures(self, resource, org_client, failing_call, summary) -> None:
        results = [[], []]
        results[failing_call] = ServerError(500, "boom")
        org_client.list_memberships.side_effect = results
        org_client.create_scim_user.return_value = ScimUser(id="u-7", user_name="n@x.io")

        response = resource.create(_plan(email="n@x.io"))

        assert [d.summary for d in response.diagnostics.errors] == [summary]

    def test_role_update_failure(self, resource, org_client) -> None:
        org_client.list_memberships.return_value = [OrganizationMembership(user_id="u-42", email="a@x.io")]
        org_client.update_membership.side_effect = ServerError(500, "boom")
        response = resource.create(_plan())
        assert [d.summary for d in response.diagnostics.errors] == ["Error updating membership role"]

    def test_invalid_role_makes_no_calls(self, resource, mock_factory) -> None:
        response = resource.create(_plan(role="SUPERUSER"))
        [error] = response.diagnostics.errors
        assert error.summary == "Invalid Role"
        assert error.detail == ROLES_MESSAGE
        mock_factory.for_scoped_keys.assert_not_called()


class TestMembershipLifecycle:
    def test_read(self, resource, org_client) -> None:
        org_client.get_membership.return_value = OrganizationMembership(
            user_id="u-42", email="", role="MEMBER", username="alice"
        )
        state = _plan().model_copy(update={"id": "u-42", "user_id": "u-42"})
        response = resource.read(state)
        org_client.get_membership.assert_called_once_with("u-42")
        assert response.state.role == "MEMBER"
        assert response.state.email == "a@x.io"
        assert response.state.username == "alice"

    def test_read_missing_signals_removal(self, resource, org_client) -> None:
        org_client.get_membership.side_effect = NotFoundError(404, "cannot find membership with ID u-42")
        response = resource.read(_plan().model_copy(update={"id": "u-42"}))
        assert response.removed is True
        assert not response.diagnostics

    def test_update_role(self, resource, org_client, mock_factory) -> None:
        state = _plan(public_key="pk-state", private_key="sk-state").model_copy(
            update={"id": "u-42", "user_id": "u-42", "role": "MEMBER"}
        )
        org_client.update_membership.return_value = OrganizationMembership(
            user_id="u-42", email="a@x.io", role="VIEWER"
        )
        response = resource.update(_plan(role="VIEWER"), state)
        mock_factory.for_scoped_keys.assert_called_once_with("pk-state", "sk-state")
        org_client.update_membership.assert_called_once_with("u-42", UpdateMembershipRequest(role="VIEWER"))
        assert response.state.role == "VIEWER"

    def test_update_invalid_role(self, resource, org_client) -> None:
        state = _plan().model_copy(update={"id": "u-42"})
        response = resource.update(_plan(role="SUPERUSER"), state)
        assert [d.detail for d in response.diagnostics.errors] == [ROLES_MESSAGE]
        org_client.update_membership.assert_not_called()

    @pytest.mark.parametrize(
        "record_id, user_id, expected",
        [("u-42", "u-42", "u-42"), ("m-1", "", "m-1"), ("m-1", "u-42", "u-42")],
    )
    def test_delete_targets_user_id(self, resource, org_client, record_id, user_id, expected) -> None:
        state = _plan().model_copy(update={"id": record_id, "user_id": user_id})
        response = resource.delete(state)
        assert not response.diagnostics
        org_client.remove_member.assert_called_once_with(expected)

    def test_delete_failure(self, resource, org_client) -> None:
        org_client.remove_member.side_effect = RemoteOperationError(
            200, "failed to remove member with ID u-42: Internal failure"
        )
        response = resource.delete(_plan().model_copy(update={"id": "u-42", "user_id": "u-42"}))
        [error] = response.diagnostics.errors
        assert error.summary == "Error removing member"
        assert "Internal failure" in error.detail

    def test_import_is_a_bare_passthrough(self, resource, mock_factory) -> None:
        response = resource.import_state("u-42")
        assert response.state == OrganizationMembershipModel(id="u-42")
        mock_factory.for_scoped_keys.assert_not_called()


class TestMembershipAgainstServer:
    @pytest.fixture
    def live(self, factory):
        r = OrganizationMembershipResource()
        r.configure(factory)
        return r

    def test_existing_member_role_assignment(self, fake, live, org_keys) -> None:
        org_id, public_key, secret_key = org_keys
        user_id = fake.add_user("a@x.io", org_id=org_id, role="MEMBER")

        response = live.create(_plan(role="ADMIN", public_key=public_key, private_key=secret_key))

        assert not response.diagnostics.has_error()
        assert response.state.id == user_id
        assert fake.org_memberships(org_id)[0]["role"] == "ADMIN"
        assert fake.requests.count("PUT /api/public/organizations/memberships") == 1
        assert "POST /api/public/scim/Users" not in fake.requests

    def test_new_user_round_trip(self, fake, live, org_keys) -> None:
        org_id, public_key, secret_key = org_keys

        created = live.create(_plan(email="n@x.io", role="VIEWER", public_key=public_key, private_key=secret_key))
        assert not created.diagnostics.has_error()
        state = created.state
        assert state.id == state.user_id
        assert state.email == "n@x.io"
        assert state.role == "VIEWER"

        assert live.read(state).state.role == "VIEWER"

        updated = live.update(state.model_copy(update={"role": "OWNER"}), state)
        assert updated.state.role == "OWNER"

        deleted = live.delete(updated.state)
        assert not deleted.diagnostics
        assert fake.org_memberships(org_id) == []
        # The account outlives the membership.
        assert state.user_id in fake.users

        assert live.read(state).removed is True

    def test_user_existing_elsewhere_conflicts(self, fake, live, org_keys) -> None:
        _, public_key, secret_key = org_keys
        fake.add_user("g@x.io")

        response = live.create(_plan(email="g@x.io", public_key=public_key, private_key=secret_key))

        [error] = response.diagnostics.errors
        assert error.summary == "Error creating user via SCIM"
        assert "[409] User with this email already exists" in error.detail

    def test_imported_record_resolves_on_read(self, fake, live, org_keys) -> None:
        org_id, public_key, secret_key = org_keys
        user_id = fake.add_user("a@x.io", org_id=org_id, role="MEMBER")

        imported = live.import_state(user_id).state
        configured = imported.model_copy(
            update={"organization_public_key": public_key, "organization_private_key": secret_key}
        )
        state = live.read(configured).state
        assert state.email == "a@x.io"
        assert state.role == "MEMBER"

    def test_non_json_removal_reply_becomes_error_diagnostic(self) -> None:
        def handler(request):
            return httpx.Response(200, text="<html>ok</html>")

        http = httpx.Client(transport=httpx.MockTransport(handler), base_url="http://test")
        resource = OrganizationMembershipResource()
        resource.configure(ClientFactory(host="http://test", http_client=http))

        response = resource.delete(_plan().model_copy(update={"id": "u-42", "user_id": "u-42"}))

        [error] = response.diagnostics.errors
        assert error.summary == "Error removing member"
        assert error.detail.startswith("User u-42: [200] unexpected response body")
