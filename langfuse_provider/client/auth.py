"""Credential handling for the Langfuse gateway."""

from __future__ import annotations

from typing import Dict

import httpx

ADMIN_KEY_ENV = "LANGFUSE_ADMIN_KEY"


def build_admin_headers(admin_api_key: str) -> Dict[str, str]:
    """Return the Authorization header dict for admin-level calls."""
    if admin_api_key:
        return {"Authorization": f"Bearer {admin_api_key}"}
    return {}


def build_scoped_auth(public_key: str, private_key: str) -> httpx.BasicAuth:
    """Basic auth for organization/project scoped key pairs (public:private)."""
    return httpx.BasicAuth(public_key, private_key)
