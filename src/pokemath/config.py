"""Centralised application configuration using pydantic-settings.

All environment variables are read through the Settings class.
Consumers call ``get_settings()`` to obtain a cached, validated instance.
Tests construct ``Settings(_env_file=None, ...)`` directly for isolation.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# src/pokemath/config.py  ->  parent x3  ->  project root
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent


# ---------------------------------------------------------------------------
# Sub-models (one per configuration domain)
# ---------------------------------------------------------------------------
class StytchConfig(BaseModel):
    """Stytch authentication provider credentials."""

    project_id: str = ""
    secret: SecretStr = SecretStr("")
    public_token: str = ""
    default_org_id: str | None = None
    environment: Literal["test", "live"] = "test"
    oauth_provider: str = "google"


class AppConfig(BaseModel):
    """Application runtime configuration."""

    base_url: str = "http://localhost:8080"
    port: int = 8080
    storage_secret: SecretStr = SecretStr("dev-secret-change-me")
    landing_path: str = "/"
    default_next_path: str = "/dashboard"
    local_redirects_only: bool = True
    session_cookie_name: str = "pokemath_session"
    session_duration_minutes: int = 60 * 24 * 7  # 1 week

    @field_validator("landing_path", "default_next_path")
    @classmethod
    def _must_be_absolute_path(cls, value: str) -> str:
        if not value.startswith("/"):
            msg = f"redirect path must start with '/': {value!r}"
            raise ValueError(msg)
        return value

    @property
    def secure_cookies(self) -> bool:
        """Mark cookies Secure when the app is served over https."""
        return self.base_url.startswith("https://")


class DevConfig(BaseModel):
    """Development and testing toggles."""

    auth_mock: bool = False


# ---------------------------------------------------------------------------
# Root settings
# ---------------------------------------------------------------------------
class Settings(BaseSettings):
    """Application settings with automatic .env loading and type validation.

    Environment variables use double-underscore delimiter for nesting:
    ``STYTCH__PROJECT_ID``, ``APP__BASE_URL``, ``DEV__AUTH_MOCK``, etc.
    """

    model_config = SettingsConfigDict(
        env_file=_PROJECT_ROOT / ".env",
        env_nested_delimiter="__",
        extra="ignore",
    )

    stytch: StytchConfig = StytchConfig()
    app: AppConfig = AppConfig()
    dev: DevConfig = DevConfig()


# ---------------------------------------------------------------------------
# Singleton access
# ---------------------------------------------------------------------------
@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance.

    Call ``get_settings.cache_clear()`` in tests to reset.
    """
    settings = Settings()

    env_file = settings.model_config.get("env_file")
    if env_file is not None and Path(str(env_file)).is_file():
        logger.info("Settings loaded .env from: %s", env_file)
    else:
        logger.info("Settings: no .env file found, using env vars and defaults")

    return settings
