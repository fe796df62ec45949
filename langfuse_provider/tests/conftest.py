"""Shared fixtures for provider tests."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from starlette.testclient import TestClient as StarletteTestClient

from langfuse_provider.client.admin import AdminClient
from langfuse_provider.client.factory import ClientFactory
from langfuse_provider.client.models import CreateOrganizationRequest
from langfuse_provider.client.organization import OrganizationClient
from langfuse_provider.tests.fake_langfuse import ADMIN_KEY, BASE_URL, FakeLangfuse


@pytest.fixture
def fake():
    return FakeLangfuse()


@pytest.fixture
def http_client(fake):
    """A starlette TestClient standing in for the shared httpx.Client."""
    return StarletteTestClient(fake.app, base_url=BASE_URL)


@pytest.fixture
def factory(http_client):
    return ClientFactory(host=BASE_URL, admin_api_key=ADMIN_KEY, http_client=http_client)


@pytest.fixture
def org_keys(factory):
    """An organization plus a key pair for it: (org_id, public_key, secret_key)."""
    admin = factory.for_admin()
    org = admin.create_organization(CreateOrganizationRequest(name="Acme"))
    key = admin.create_organization_api_key(org.id)
    return org.id, key.public_key, key.secret_key


# ── Mock gateways for unit tests ─────────────────────────────────


@pytest.fixture
def admin_client():
    return MagicMock(spec=AdminClient)


@pytest.fixture
def org_client():
    return MagicMock(spec=OrganizationClient)


@pytest.fixture
def mock_factory(admin_client, org_client):
    factory = MagicMock(spec=ClientFactory)
    factory.for_admin.return_value = admin_client
    factory.for_scoped_keys.return_value = org_client
    return factory
