"""Authentication module for PokeMath.

Provides the OAuth session lifecycle behind the auth API routes:
- Code exchange on the provider callback
- Best-effort sign-out
- Stytch B2B Auth Service, plus a mock for testing

Usage:
    from pokemath.auth import get_auth_service, make_session_cookies, run_callback

    cookies = make_session_cookies(request.cookies)
    outcome = await run_callback(
        IncomingAuthRequest(code="...", next="/dashboard"),
        get_auth_service(cookies),
    )
"""

from __future__ import annotations

from pokemath.auth.cookies import SessionCookies
from pokemath.auth.factory import (
    clear_config_cache,
    get_auth_service,
    get_oauth_start_url,
    make_session_cookies,
)
from pokemath.auth.flow import (
    CallbackOutcome,
    CallbackState,
    IncomingAuthRequest,
    RedirectDecision,
    SignoutOutcome,
    SignoutState,
    run_callback,
    run_signout,
)
from pokemath.auth.models import (
    AuthError,
    ExchangeResult,
    OAuthStartResult,
    Session,
    SignOutResult,
)
from pokemath.auth.protocol import AuthServiceProtocol

__all__ = [
    "AuthError",
    "AuthServiceProtocol",
    "CallbackOutcome",
    "CallbackState",
    "ExchangeResult",
    "IncomingAuthRequest",
    "OAuthStartResult",
    "RedirectDecision",
    "Session",
    "SessionCookies",
    "SignOutResult",
    "SignoutOutcome",
    "SignoutState",
    "clear_config_cache",
    "get_auth_service",
    "get_oauth_start_url",
    "make_session_cookies",
    "run_callback",
    "run_signout",
]
