"""Repo-wide test fixtures.

Snapshots and restores provider environment variables between tests
so credentials set by one module never leak into another.
"""

from __future__ import annotations

import os

import pytest

_PROVIDER_ENV_VARS = [
    "LANGFUSE_HOST",
    "LANGFUSE_ADMIN_KEY",
    "LANGFUSE_TIMEOUT",
    "LANGFUSE_RETRIES",
    "LANGFUSE_LOG_FORMAT",
]


@pytest.fixture(autouse=True)
def _restore_env():
    """Snapshot provider env vars before each test and restore after."""
    snapshot = {}
    for var in _PROVIDER_ENV_VARS:
        val = os.environ.get(var)
        if val is not None:
            snapshot[var] = val

    yield

    for var in _PROVIDER_ENV_VARS:
        if var in snapshot:
            os.environ[var] = snapshot[var]
        else:
            os.environ.pop(var, None)
