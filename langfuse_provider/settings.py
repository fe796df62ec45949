"""Centralized provider settings.

Reads environment variables with sensible defaults. Never exposes secrets in
repr or serialization.
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass, replace
from typing import Any, Dict

from langfuse_provider.client.auth import ADMIN_KEY_ENV
from langfuse_provider.client.factory import DEFAULT_HOST

LOG_FORMATS = ("text", "json")


def _int_env(key: str, default: int) -> int:
    """Parse an int env var with fallback."""
    val = os.environ.get(key)
    if val is None:
        return default
    try:
        return int(val)
    except ValueError:
        return default


def _float_env(key: str, default: float) -> float:
    """Parse a float env var with fallback."""
    val = os.environ.get(key)
    if val is None:
        return default
    try:
        return float(val)
    except ValueError:
        return default


@dataclass(frozen=True)
class ProviderSettings:
    """Immutable provider configuration. Safe to log; secrets are masked."""

    host: str = DEFAULT_HOST
    admin_api_key: str = ""
    timeout: float = 30.0
    retries: int = 0
    log_format: str = "text"

    def __repr__(self) -> str:
        return (
            f"ProviderSettings(host={self.host!r}, "
            f"admin_api_key={'***' if self.admin_api_key else ''!r}, "
            f"timeout={self.timeout}, retries={self.retries}, "
            f"log_format={self.log_format!r})"
        )

    def to_dict(self) -> Dict[str, Any]:
        """JSON-safe dict with admin_api_key masked."""
        return {
            "host": self.host,
            "admin_api_key": "configured" if self.admin_api_key else "not set",
            "timeout": self.timeout,
            "retries": self.retries,
            "log_format": self.log_format,
        }


def load_settings(**overrides: Any) -> ProviderSettings:
    """Load settings from environment, then apply non-empty overrides.

    Explicit configuration wins over the environment; empty strings and None
    count as "unset" so a blank ``host`` still falls back to the hosted endpoint.
    """
    settings = ProviderSettings(
        host=os.environ.get("LANGFUSE_HOST") or DEFAULT_HOST,
        admin_api_key=os.environ.get(ADMIN_KEY_ENV, ""),
        timeout=_float_env("LANGFUSE_TIMEOUT", 30.0),
        retries=max(_int_env("LANGFUSE_RETRIES", 0), 0),
        log_format=os.environ.get("LANGFUSE_LOG_FORMAT", "text"),
    )
    applied = {k: v for k, v in overrides.items() if v is not None and v != ""}
    if applied:
        settings = replace(settings, **applied)
    if settings.log_format not in LOG_FORMATS:
        settings = replace(settings, log_format="text")
    return settings


def configure_logging(verbose: bool = False, log_format: str = "text") -> None:
    level = logging.DEBUG if verbose else logging.INFO
    # JSON lines are rendered by the emitting code, so the format is message-only.
    fmt = "%(message)s" if log_format == "json" else "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    logging.basicConfig(format=fmt, level=level, stream=sys.stderr)
