"""Authenticator settings.

Settings are plain pydantic models so they can be built in code or loaded
from a YAML file:

    device_ip_url: https://device.payfone.com:4443/whatismyip
    max_redirects: 10
    verify_ssl: true
    extra_rewrite_rules:
      - name: legacy_carrier
        prefix: http://auth.legacy.example/start
        replacement: https://auth.legacy.example/secure/start

Usage:
    from payfone_auth.config import load_settings
    settings = load_settings("payfone.yaml")
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml  # type: ignore[import-untyped]
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .const import DEFAULT_MAX_REDIRECTS, DEVICE_IP_URL

_LOGGER = logging.getLogger(__name__)


class PrefixRewriteRule(BaseModel):
    """Rewrite URLs starting with prefix to start with replacement instead."""

    model_config = ConfigDict(extra="forbid")

    name: str
    prefix: str = Field(min_length=1)
    replacement: str = Field(min_length=1)


class AuthenticatorSettings(BaseModel):
    """Tunable settings for an Authenticator."""

    model_config = ConfigDict(extra="forbid")

    device_ip_url: str = DEVICE_IP_URL
    max_redirects: int = Field(default=DEFAULT_MAX_REDIRECTS, ge=0)
    verify_ssl: bool = True
    user_agent: str | None = None
    extra_rewrite_rules: list[PrefixRewriteRule] = Field(default_factory=list)


def load_settings(path: str | Path) -> AuthenticatorSettings:
    """Load settings from a YAML file.

    An empty file yields the defaults.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the YAML does not match AuthenticatorSettings
    """
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping at the top level")

    try:
        settings = AuthenticatorSettings(**data)
    except ValidationError as e:
        raise ValueError(f"{path}: invalid authenticator settings: {e}") from e

    _LOGGER.debug(
        "Loaded settings from %s (max_redirects=%d, %d extra rewrite rules)",
        path,
        settings.max_redirects,
        len(settings.extra_rewrite_rules),
    )
    return settings
