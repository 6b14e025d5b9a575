"""Shared pytest fixtures for PokeMath tests."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING
from unittest.mock import MagicMock, patch

import pytest
import pytest_asyncio

from pokemath.auth.factory import clear_config_cache
from pokemath.auth.models import AuthError, ExchangeResult, Session, SignOutResult
from pokemath.config import Settings

if TYPE_CHECKING:
    from collections.abc import Iterator

    from pokemath.auth.cookies import SessionCookies

_SETTINGS_ENV_PREFIXES = ("STYTCH__", "APP__", "DEV__")


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Run every test against defaults: no .env file, no settings env vars."""
    for key in list(os.environ):
        if key.startswith(_SETTINGS_ENV_PREFIXES):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setitem(Settings.model_config, "env_file", None)
    clear_config_cache()
    yield
    clear_config_cache()


@pytest.fixture
def auth_mock_enabled(monkeypatch: pytest.MonkeyPatch) -> None:
    """Switch the factory to the mock Auth Service."""
    monkeypatch.setenv("DEV__AUTH_MOCK", "true")
    clear_config_cache()


@pytest_asyncio.fixture
async def mock_stytch_client():
    """Create a mocked Stytch B2BClient for unit tests.

    Patches the B2BClient constructor to return a mock, allowing
    tests to set up expected responses without making real API calls.

    Made async to ensure proper event loop handling with pytest-asyncio.
    """
    with patch("pokemath.auth.client.B2BClient") as mock_cls:
        mock_client = MagicMock()
        mock_cls.return_value = mock_client
        yield mock_client


class RecordingAuthService:
    """Auth Service fake that records calls and returns scripted results."""

    def __init__(
        self,
        cookies: SessionCookies | None = None,
        *,
        exchange_error: str | None = None,
        sign_out_error: str | None = None,
        raises: Exception | None = None,
    ) -> None:
        self.cookies = cookies
        self.exchange_error = exchange_error
        self.sign_out_error = sign_out_error
        self.raises = raises
        self.exchange_calls: list[str] = []
        self.sign_out_calls = 0

    async def exchange_code_for_session(self, code: str) -> ExchangeResult:
        self.exchange_calls.append(code)
        if self.raises is not None:
            raise self.raises
        if self.exchange_error:
            return ExchangeResult(
                error=AuthError(error_type=self.exchange_error, message="rejected")
            )
        session = Session(session_token=f"session-for-{code}", email="ash@pallet.town")
        if self.cookies is not None:
            self.cookies.set_session(session.session_token)
        return ExchangeResult(session=session)

    async def sign_out(self) -> SignOutResult:
        self.sign_out_calls += 1
        if self.raises is not None:
            raise self.raises
        if self.cookies is not None:
            self.cookies.clear_session()
        if self.sign_out_error:
            return SignOutResult(error=AuthError(error_type=self.sign_out_error))
        return SignOutResult()


@pytest.fixture
def recording_service() -> RecordingAuthService:
    return RecordingAuthService()
