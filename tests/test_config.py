"""Tests for settings loading."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from payfone_auth.config import AuthenticatorSettings, load_settings
from payfone_auth.const import DEFAULT_MAX_REDIRECTS, DEVICE_IP_URL


class TestAuthenticatorSettings:
    """Defaults and validation."""

    def test_defaults(self):
        """Defaults match the production service."""
        settings = AuthenticatorSettings()
        assert settings.device_ip_url == DEVICE_IP_URL
        assert settings.max_redirects == DEFAULT_MAX_REDIRECTS
        assert settings.verify_ssl is True
        assert settings.extra_rewrite_rules == []

    def test_negative_redirects_rejected(self):
        """max_redirects cannot be negative."""
        with pytest.raises(ValidationError):
            AuthenticatorSettings(max_redirects=-1)

    def test_unknown_key_rejected(self):
        """Typos in settings are caught."""
        with pytest.raises(ValidationError):
            AuthenticatorSettings(max_redirect=3)


class TestLoadSettings:
    """YAML loading."""

    def test_load(self, tmp_path):
        """All fields load from YAML."""
        path = tmp_path / "payfone.yaml"
        path.write_text(
            """
device_ip_url: https://ip.example/
max_redirects: 3
verify_ssl: false
user_agent: my-app/1.0
extra_rewrite_rules:
  - name: legacy
    prefix: http://legacy.example
    replacement: https://legacy.example
""",
            encoding="utf-8",
        )

        settings = load_settings(path)

        assert settings.device_ip_url == "https://ip.example/"
        assert settings.max_redirects == 3
        assert settings.verify_ssl is False
        assert settings.user_agent == "my-app/1.0"
        assert settings.extra_rewrite_rules[0].replacement == "https://legacy.example"

    def test_empty_file(self, tmp_path):
        """An empty file yields the defaults."""
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")

        assert load_settings(path) == AuthenticatorSettings()

    def test_not_a_mapping(self, tmp_path):
        """A YAML list is rejected."""
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(ValueError, match="mapping"):
            load_settings(path)

    def test_invalid_values(self, tmp_path):
        """Validation errors become ValueError with the file name."""
        path = tmp_path / "bad.yaml"
        path.write_text("max_redirects: lots\n", encoding="utf-8")

        with pytest.raises(ValueError, match="bad.yaml"):
            load_settings(path)

    def test_missing_file(self, tmp_path):
        """Missing files raise FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_settings(tmp_path / "missing.yaml")
