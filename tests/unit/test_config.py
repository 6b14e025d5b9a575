"""Tests for the pydantic-settings configuration."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from pydantic import ValidationError

from pokemath.config import AppConfig, Settings, get_settings

if TYPE_CHECKING:
    from pytest import MonkeyPatch


class TestDefaults:
    def test_redirect_defaults(self) -> None:
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.app.landing_path == "/"
        assert s.app.default_next_path == "/dashboard"
        assert s.app.local_redirects_only is True

    def test_auth_defaults(self) -> None:
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.dev.auth_mock is False
        assert s.stytch.environment == "test"
        assert s.stytch.oauth_provider == "google"
        assert s.app.session_cookie_name == "pokemath_session"
        assert s.app.session_duration_minutes == 60 * 24 * 7


class TestEnvOverrides:
    def test_nested_delimiter(self, monkeypatch: MonkeyPatch) -> None:
        monkeypatch.setenv("APP__DEFAULT_NEXT_PATH", "/collection")
        monkeypatch.setenv("DEV__AUTH_MOCK", "true")
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.app.default_next_path == "/collection"
        assert s.dev.auth_mock is True

    def test_secret_not_exposed_in_repr(self, monkeypatch: MonkeyPatch) -> None:
        monkeypatch.setenv("STYTCH__SECRET", "super-secret")
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert "super-secret" not in repr(s)
        assert s.stytch.secret.get_secret_value() == "super-secret"

    def test_invalid_environment(self, monkeypatch: MonkeyPatch) -> None:
        monkeypatch.setenv("STYTCH__ENVIRONMENT", "staging")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)  # type: ignore[call-arg]


class TestAppConfig:
    @pytest.mark.parametrize("field", ["landing_path", "default_next_path"])
    def test_paths_must_be_absolute(self, field: str) -> None:
        with pytest.raises(ValidationError, match="must start with"):
            AppConfig(**{field: "dashboard"})

    def test_secure_cookies_follow_scheme(self) -> None:
        assert AppConfig(base_url="https://pokemath.example").secure_cookies is True
        assert AppConfig(base_url="http://localhost:8080").secure_cookies is False


class TestGetSettings:
    def test_cached(self) -> None:
        assert get_settings() is get_settings()

    def test_cache_clear_rereads_env(self, monkeypatch: MonkeyPatch) -> None:
        first = get_settings()
        monkeypatch.setenv("APP__PORT", "9090")
        get_settings.cache_clear()
        assert get_settings() is not first
        assert get_settings().app.port == 9090
