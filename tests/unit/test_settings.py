"""Tests for openam_auth.config -- Settings and sub-models.

Every test constructs Settings(_env_file=None, ...) to avoid reading real .env files.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from openam_auth.config import (
    AppConfig,
    DevConfig,
    OpenAmConfig,
    Settings,
    get_settings,
)


class TestDefaults:
    def test_openam_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for key in ("OPENAM__REALM", "OPENAM__COOKIE_NAME", "DEV__AUTH_MOCK"):
            monkeypatch.delenv(key, raising=False)

        s = Settings(_env_file=None)  # type: ignore[call-arg]

        assert s.openam.realm == "/"
        assert s.openam.cookie_name == "iPlanetDirectoryPro"
        assert s.openam.skip_user_profile is False
        assert s.openam.login_page is True
        assert s.openam.timeout_seconds == 10.0
        assert s.dev.auth_mock is False
        assert s.app.log_dir == Path("logs")


class TestEnvOverrides:
    """Double-underscore env vars populate the nested sub-models."""

    def test_nested_env_vars(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OPENAM__BASE_URL", "https://sso.example.test/openam/")
        monkeypatch.setenv("OPENAM__CALLBACK_URL", "/auth/openam/callback")
        monkeypatch.setenv("OPENAM__SKIP_USER_PROFILE", "true")
        monkeypatch.setenv("OPENAM__TIMEOUT_SECONDS", "3")
        monkeypatch.setenv("DEV__AUTH_MOCK", "true")

        s = Settings(_env_file=None)  # type: ignore[call-arg]

        assert s.openam.base_url == "https://sso.example.test/openam/"
        assert s.openam.callback_url == "/auth/openam/callback"
        assert s.openam.skip_user_profile is True
        assert s.openam.timeout_seconds == 3.0
        assert s.dev.auth_mock is True

    def test_invalid_bool_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DEV__AUTH_MOCK", "perhaps")

        with pytest.raises(ValidationError):
            Settings(_env_file=None)  # type: ignore[call-arg]


class TestSubModelValidation:
    def test_realm_must_be_absolute(self) -> None:
        with pytest.raises(ValidationError, match="OPENAM__REALM"):
            OpenAmConfig(realm="employees")

    def test_timeout_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            OpenAmConfig(timeout_seconds=0)

    def test_explicit_sub_models(self) -> None:
        s = Settings(
            _env_file=None,  # type: ignore[call-arg]
            app=AppConfig(log_dir=Path("/tmp/openam-logs"), log_level="DEBUG"),
            dev=DevConfig(auth_mock=True),
        )

        assert s.app.log_dir == Path("/tmp/openam-logs")
        assert s.app.log_level == "DEBUG"
        assert s.dev.auth_mock is True


class TestGetSettings:
    def test_cached(self) -> None:
        assert get_settings() is get_settings()

    def test_cache_clear(self) -> None:
        first = get_settings()
        get_settings.cache_clear()

        assert get_settings() is not first

    def test_logs_env_source(self, caplog: pytest.LogCaptureFixture) -> None:
        get_settings.cache_clear()

        with caplog.at_level(logging.INFO, logger="openam_auth.config"):
            get_settings()

        assert "Settings" in caplog.text
