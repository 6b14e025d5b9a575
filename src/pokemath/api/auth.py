"""Auth API routes.

GET-only endpoints that always answer with a 302 redirect:

- ``/api/auth/callback`` exchanges the provider's code for a session
- ``/api/auth/signout`` ends the session
- ``/api/auth/signin`` starts an OAuth sign-in

The Auth Service is injected as a FastAPI dependency so tests can swap it
via ``app.dependency_overrides[auth_service]``.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import RedirectResponse

from pokemath.auth import (
    AuthServiceProtocol,
    IncomingAuthRequest,
    RedirectDecision,
    SessionCookies,
    get_auth_service,
    get_oauth_start_url,
    make_session_cookies,
    run_callback,
    run_signout,
)
from pokemath.config import get_settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def session_cookies(request: Request) -> SessionCookies:
    """Per-request session cookie jar (shared by every dependency)."""
    return make_session_cookies(request.cookies)


def auth_service(
    cookies: Annotated[SessionCookies, Depends(session_cookies)],
) -> AuthServiceProtocol:
    return get_auth_service(cookies)


def _redirect(decision: RedirectDecision, cookies: SessionCookies) -> RedirectResponse:
    response = RedirectResponse(decision.target, status_code=decision.status_code)
    response.headers["Cache-Control"] = "no-store"
    return cookies.apply(response)


@router.get("/callback")
async def callback(
    cookies: Annotated[SessionCookies, Depends(session_cookies)],
    service: Annotated[AuthServiceProtocol, Depends(auth_service)],
    code: str | None = None,
    next_path: Annotated[str | None, Query(alias="next")] = None,
) -> RedirectResponse:
    """OAuth callback: exchange the code for a session, then redirect.

    With ``APP__LOCAL_REDIRECTS_ONLY`` (on by default) a ``next`` that is not
    a local path, such as ``https://elsewhere.example/``, is ignored and the
    browser goes to ``APP__DEFAULT_NEXT_PATH`` (``/dashboard``) instead.
    """
    app_config = get_settings().app
    outcome = await run_callback(
        IncomingAuthRequest(code=code, next=next_path),
        service,
        default_next=app_config.default_next_path,
        landing_path=app_config.landing_path,
        local_only=app_config.local_redirects_only,
    )
    logger.debug("Auth callback finished in state %s", outcome.state.value)
    return _redirect(outcome.redirect, cookies)


@router.get("/signout")
async def signout(
    cookies: Annotated[SessionCookies, Depends(session_cookies)],
    service: Annotated[AuthServiceProtocol, Depends(auth_service)],
) -> RedirectResponse:
    """Clear the user's session and redirect to the landing page."""
    outcome = await run_signout(service, landing_path=get_settings().app.landing_path)
    return _redirect(outcome.redirect, cookies)


@router.get("/signin")
async def signin(
    next_path: Annotated[str | None, Query(alias="next")] = None,
) -> RedirectResponse:
    """Send the browser to the OAuth provider to start a sign-in."""
    settings = get_settings()
    result = get_oauth_start_url(next_path)

    if not result.success or not result.redirect_url:
        logger.error("OAuth sign-in start failed: %s", result.error)
        target = settings.app.landing_path
    else:
        logger.info("Starting %s OAuth sign-in", settings.stytch.oauth_provider)
        target = result.redirect_url

    response = RedirectResponse(target, status_code=302)
    response.headers["Cache-Control"] = "no-store"
    return response
