"""Auth Service factory.

Provides factory functions to get the appropriate Auth Service for a
request based on configuration (real Stytch or mock for testing).
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING
from urllib.parse import urlencode

from pokemath.auth.cookies import SessionCookies
from pokemath.auth.models import OAuthStartResult
from pokemath.config import get_settings

if TYPE_CHECKING:
    from pokemath.auth.mock import MockSessionRegistry
    from pokemath.auth.protocol import AuthServiceProtocol

CALLBACK_PATH = "/api/auth/callback"

# Cached mock registry to preserve sessions across requests
_mock_registry: MockSessionRegistry | None = None


def get_mock_registry() -> MockSessionRegistry:
    """Return the shared mock session registry, creating it on first use."""
    global _mock_registry  # noqa: PLW0603
    if _mock_registry is None:
        from pokemath.auth.mock import MockSessionRegistry

        _mock_registry = MockSessionRegistry()
    return _mock_registry


def make_session_cookies(request_cookies: Mapping[str, str]) -> SessionCookies:
    """Build the session cookie jar for a request from configuration."""
    app_config = get_settings().app
    return SessionCookies(
        request_cookies,
        app_config.session_cookie_name,
        max_age=app_config.session_duration_minutes * 60,
        secure=app_config.secure_cookies,
    )


def get_auth_service(cookies: SessionCookies) -> AuthServiceProtocol:
    """Get the Auth Service for one request based on configuration.

    If DEV__AUTH_MOCK=true, returns a MockAuthService sharing one registry.
    Otherwise, returns StytchAuthService with real credentials.

    Args:
        cookies: The request's session cookie jar.

    Returns:
        An Auth Service implementing AuthServiceProtocol.

    Raises:
        ValueError: If stytch.project_id is empty and mock mode is disabled.
    """
    settings = get_settings()

    if settings.dev.auth_mock:
        from pokemath.auth.mock import MockAuthService

        return MockAuthService(cookies, get_mock_registry())

    stytch = settings.stytch
    if not stytch.project_id:
        msg = (
            "STYTCH__PROJECT_ID is required when DEV__AUTH_MOCK is not enabled. "
            "Set STYTCH__PROJECT_ID and STYTCH__SECRET in your .env file."
        )
        raise ValueError(msg)

    from pokemath.auth.client import StytchAuthService

    return StytchAuthService(
        project_id=stytch.project_id,
        secret=stytch.secret.get_secret_value(),
        cookies=cookies,
        environment=stytch.environment,
        session_duration_minutes=settings.app.session_duration_minutes,
    )


def callback_url(next_path: str | None = None) -> str:
    """Absolute callback URL, carrying the post-login path if given."""
    url = f"{get_settings().app.base_url.rstrip('/')}{CALLBACK_PATH}"
    if next_path:
        url = f"{url}?{urlencode({'next': next_path})}"
    return url


def get_oauth_start_url(next_path: str | None = None) -> OAuthStartResult:
    """Get the URL that starts a sign-in.

    In mock mode this points straight at the callback with a valid mock
    code; otherwise at the Stytch OAuth start endpoint for the configured
    provider.
    """
    settings = get_settings()

    if settings.dev.auth_mock:
        from pokemath.auth.mock import MOCK_VALID_CODE

        params = {"code": MOCK_VALID_CODE}
        if next_path:
            params["next"] = next_path
        return OAuthStartResult(
            success=True,
            redirect_url=f"{CALLBACK_PATH}?{urlencode(params)}",
        )

    from pokemath.auth.client import build_oauth_start_url

    stytch = settings.stytch
    return build_oauth_start_url(
        provider=stytch.oauth_provider,
        public_token=stytch.public_token,
        organization_id=stytch.default_org_id or "",
        login_redirect_url=callback_url(next_path),
        environment=stytch.environment,
    )


def clear_config_cache() -> None:
    """Clear the configuration and mock registry caches.

    Useful for testing when you need to reload configuration
    or reset mock session state.
    """
    global _mock_registry  # noqa: PLW0603
    get_settings.cache_clear()
    _mock_registry = None
