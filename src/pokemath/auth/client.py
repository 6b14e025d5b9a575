"""Stytch B2B Auth Service.

This module provides a wrapper around the Stytch B2B SDK that implements
the AuthServiceProtocol: OAuth code exchange and session revocation, with
the session token persisted through the request's SessionCookies.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any
from urllib.parse import urlencode

import aiohttp
from stytch import B2BClient
from stytch.core.response_base import StytchError

from pokemath.auth.models import (
    AuthError,
    ExchangeResult,
    OAuthStartResult,
    Session,
    SignOutResult,
)

if TYPE_CHECKING:
    from pokemath.auth.cookies import SessionCookies

logger = logging.getLogger(__name__)

# Stytch API base URLs
STYTCH_TEST_API = "https://test.stytch.com"
STYTCH_LIVE_API = "https://api.stytch.com"

DEFAULT_SESSION_DURATION_MINUTES = 60 * 24 * 7  # 1 week

# Raised by the SDK's aiohttp transport before Stytch answers
_TRANSPORT_ERRORS = (aiohttp.ClientError, TimeoutError, OSError)


def _format_expiry(raw: Any) -> str | None:
    """Normalise a session expiry from the SDK (datetime or string)."""
    if raw is None:
        return None
    if hasattr(raw, "isoformat"):
        return raw.isoformat()
    return str(raw)


def _to_auth_error(exc: StytchError) -> AuthError:
    details = exc.details
    return AuthError(
        error_type=details.error_type,
        message=getattr(details, "error_message", None),
    )


def _network_error(exc: BaseException) -> AuthError:
    return AuthError(
        error_type="network_error",
        message=str(exc) or type(exc).__name__,
    )


def build_oauth_start_url(
    provider: str,
    public_token: str,
    organization_id: str,
    login_redirect_url: str,
    *,
    environment: str = "test",
) -> OAuthStartResult:
    """Generate the URL to start an OAuth flow for a known organization.

    Args:
        provider: The OAuth provider (e.g., "google").
        public_token: The Stytch public token.
        organization_id: The Stytch organization ID.
        login_redirect_url: URL to redirect to after OAuth completes.
        environment: Either "test" or "live".

    Returns:
        OAuthStartResult with the redirect URL.
    """
    if not public_token:
        return OAuthStartResult(success=False, error="missing_public_token")
    if not organization_id:
        return OAuthStartResult(success=False, error="missing_organization_id")

    base_url = STYTCH_TEST_API if environment == "test" else STYTCH_LIVE_API
    params = {
        "public_token": public_token,
        "organization_id": organization_id,
        "login_redirect_url": login_redirect_url,
        "signup_redirect_url": login_redirect_url,
    }
    redirect_url = (
        f"{base_url}/v1/b2b/public/oauth/{provider}/start?{urlencode(params)}"
    )
    return OAuthStartResult(success=True, redirect_url=redirect_url)


class StytchAuthService:
    """Auth Service backed by the Stytch B2B API.

    One instance serves one request: it is bound to that request's
    SessionCookies and writes the session token there on success.
    """

    def __init__(
        self,
        project_id: str,
        secret: str,
        cookies: SessionCookies,
        *,
        environment: str = "test",
        session_duration_minutes: int = DEFAULT_SESSION_DURATION_MINUTES,
    ) -> None:
        """Initialize the Stytch client.

        Args:
            project_id: Stytch project ID.
            secret: Stytch secret key.
            cookies: The request's session cookie jar.
            environment: Either "test" or "live".
            session_duration_minutes: Lifetime of newly issued sessions.
        """
        self._client = B2BClient(
            project_id=project_id,
            secret=secret,
            environment=environment,
        )
        self._cookies = cookies
        self._session_duration_minutes = session_duration_minutes

    async def exchange_code_for_session(self, code: str) -> ExchangeResult:
        """Authenticate an OAuth token from the provider callback.

        Args:
            code: The OAuth token from the callback URL.

        Returns:
            ExchangeResult with the session if successful.
        """
        try:
            response = await self._client.oauth.authenticate_async(
                oauth_token=code,
                session_duration_minutes=self._session_duration_minutes,
            )
        except StytchError as e:
            logger.debug(
                "OAuth exchange rejected",
                extra={"error_type": e.details.error_type},
            )
            return ExchangeResult(error=_to_auth_error(e))
        except _TRANSPORT_ERRORS as e:
            logger.debug("OAuth exchange unreachable: %r", e)
            return ExchangeResult(error=_network_error(e))

        # Check if MFA is required
        if not response.member_authenticated:
            logger.info("MFA required for OAuth member %s", response.member_id)
            return ExchangeResult(error=AuthError(error_type="mfa_required"))

        session = Session(
            session_token=response.session_token,
            session_jwt=response.session_jwt,
            member_id=response.member_id,
            organization_id=response.organization_id,
            email=response.member.email_address,
            expires_at=_format_expiry(
                getattr(response.member_session, "expires_at", None)
            ),
        )
        self._cookies.set_session(session.session_token)
        return ExchangeResult(session=session)

    async def sign_out(self) -> SignOutResult:
        """Revoke the current session and clear its cookie.

        Returns:
            SignOutResult; an absent or already-revoked session is an error.
        """
        session_token = self._cookies.session_token
        self._cookies.clear_session()

        if not session_token:
            return SignOutResult(error=AuthError(error_type="session_not_found"))

        try:
            await self._client.sessions.revoke_async(session_token=session_token)
        except StytchError as e:
            logger.debug(
                "Session revoke failed",
                extra={"error_type": e.details.error_type},
            )
            return SignOutResult(error=_to_auth_error(e))
        except _TRANSPORT_ERRORS as e:
            logger.debug("Session revoke unreachable: %r", e)
            return SignOutResult(error=_network_error(e))
        return SignOutResult()
