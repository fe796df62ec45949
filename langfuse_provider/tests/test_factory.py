"""Tests for ClientFactory credential handling."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from langfuse_provider.client.admin import AdminClient
from langfuse_provider.client.errors import MissingCredentialsError
from langfuse_provider.client.factory import DEFAULT_HOST, ClientFactory
from langfuse_provider.client.organization import OrganizationClient


class TestClientFactory:
    def test_default_host(self) -> None:
        with ClientFactory() as factory:
            assert factory.host == DEFAULT_HOST == "https://app.langfuse.com"
            assert factory.has_admin_key is False

    def test_blank_host_falls_back_to_default(self) -> None:
        with ClientFactory(host="") as factory:
            assert factory.host == DEFAULT_HOST

    def test_trailing_slash_stripped(self) -> None:
        with ClientFactory(host="http://langfuse.internal/") as factory:
            assert factory.host == "http://langfuse.internal"

    def test_admin_requires_key(self) -> None:
        factory = ClientFactory(http_client=MagicMock())
        with pytest.raises(MissingCredentialsError, match="LANGFUSE_ADMIN_KEY"):
            factory.for_admin()

    def test_admin_client(self) -> None:
        factory = ClientFactory(admin_api_key="adm", retries=2, http_client=MagicMock())
        admin = factory.for_admin()
        assert isinstance(admin, AdminClient)
        assert admin._auth_headers() == {"Authorization": "Bearer adm"}
        assert admin._retries == 2

    @pytest.mark.parametrize("public_key, private_key", [("", "sk"), ("pk", ""), ("", "")])
    def test_scoped_requires_both_keys(self, public_key, private_key) -> None:
        factory = ClientFactory(http_client=MagicMock())
        with pytest.raises(MissingCredentialsError):
            factory.for_scoped_keys(public_key, private_key)

    def test_scoped_client_needs_no_admin_key(self) -> None:
        factory = ClientFactory(http_client=MagicMock())
        client = factory.for_scoped_keys("pk", "sk")
        assert isinstance(client, OrganizationClient)

    def test_gateways_share_one_connection_pool(self) -> None:
        http = MagicMock()
        factory = ClientFactory(admin_api_key="adm", http_client=http)
        assert factory.for_admin()._client is http
        assert factory.for_scoped_keys("pk", "sk")._client is http
        assert factory.for_scoped_keys("pk2", "sk2")._client is http

    def test_repr_masks_admin_key(self) -> None:
        factory = ClientFactory(admin_api_key="adm-secret", http_client=MagicMock())
        assert "adm-secret" not in repr(factory)
        assert "***" in repr(factory)

    def test_close_leaves_injected_client_open(self) -> None:
        http = MagicMock()
        ClientFactory(http_client=http).close()
        http.close.assert_not_called()

    def test_close_owned_client(self) -> None:
        with ClientFactory() as factory:
            pass
        assert factory._http.is_closed
