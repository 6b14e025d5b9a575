"""Session lifecycle state machine for the callback and signout routes.

Both handlers are pure with respect to HTTP: they take the request values
and an Auth Service, and return an outcome naming the terminal state and
the redirect to issue. The route layer in ``pokemath.api.auth`` turns the
outcome into a response.

Callback::

    RECEIVED --no code--> NO_CODE          (redirect to landing)
    RECEIVED --code-----> EXCHANGING
    EXCHANGING --error--> EXCHANGE_FAILED  (log once, redirect to landing)
    EXCHANGING --ok-----> ESTABLISHED      (redirect to next)

Signout::

    RECEIVED --sign_out()--> SIGNED_OUT    (redirect to landing, always)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING
from urllib.parse import urlsplit

from pokemath.auth.models import AuthError

if TYPE_CHECKING:
    from pokemath.auth.models import Session
    from pokemath.auth.protocol import AuthServiceProtocol

logger = logging.getLogger(__name__)

DEFAULT_NEXT_PATH = "/dashboard"
LANDING_PATH = "/"


class CallbackState(Enum):
    RECEIVED = "received"
    NO_CODE = "no_code"
    EXCHANGING = "exchanging"
    EXCHANGE_FAILED = "exchange_failed"
    ESTABLISHED = "established"


class SignoutState(Enum):
    RECEIVED = "received"
    SIGNED_OUT = "signed_out"


@dataclass(frozen=True)
class RedirectDecision:
    """Where to send the browser. Always a temporary (302) redirect."""

    target: str
    status_code: int = 302


@dataclass(frozen=True)
class IncomingAuthRequest:
    """Query parameters of an OAuth provider redirect."""

    code: str | None = None
    next: str | None = None


@dataclass(frozen=True)
class CallbackOutcome:
    state: CallbackState
    redirect: RedirectDecision
    session: Session | None = None
    error: AuthError | None = None


@dataclass(frozen=True)
class SignoutOutcome:
    state: SignoutState
    redirect: RedirectDecision
    error: AuthError | None = None


def is_local_path(target: str) -> bool:
    """True if ``target`` is an in-application path with no scheme or host.

    Rejects protocol-relative (``//evil``) and backslash forms that some
    browsers normalise into one.
    """
    if not target.startswith("/") or target.startswith(("//", "/\\")):
        return False
    parts = urlsplit(target)
    return not parts.scheme and not parts.netloc


def resolve_next(
    next_path: str | None,
    *,
    default_next: str = DEFAULT_NEXT_PATH,
    local_only: bool = True,
) -> str:
    """Choose the post-login redirect target."""
    if not next_path:
        return default_next
    if local_only and not is_local_path(next_path):
        logger.warning("Ignoring non-local redirect target: %r", next_path)
        return default_next
    return next_path


async def run_callback(
    request: IncomingAuthRequest,
    auth_service: AuthServiceProtocol,
    *,
    default_next: str = DEFAULT_NEXT_PATH,
    landing_path: str = LANDING_PATH,
    local_only: bool = True,
) -> CallbackOutcome:
    """Drive one OAuth callback from RECEIVED to a terminal state.

    The code is exchanged at most once; authorization codes are single-use
    so a failed exchange is never retried.
    """
    if not request.code:
        logger.debug("Auth callback without code, redirecting to %s", landing_path)
        return CallbackOutcome(
            state=CallbackState.NO_CODE,
            redirect=RedirectDecision(landing_path),
        )

    try:
        result = await auth_service.exchange_code_for_session(request.code)
    except Exception as exc:
        logger.exception("Error exchanging code for session: unexpected_error")
        return CallbackOutcome(
            state=CallbackState.EXCHANGE_FAILED,
            redirect=RedirectDecision(landing_path),
            error=AuthError(error_type="unexpected_error", message=repr(exc)),
        )

    if result.error is not None:
        logger.error(
            "Error exchanging code for session: %s (%s)",
            result.error.error_type,
            result.error.message or "no detail",
        )
        return CallbackOutcome(
            state=CallbackState.EXCHANGE_FAILED,
            redirect=RedirectDecision(landing_path),
            error=result.error,
        )

    target = resolve_next(
        request.next, default_next=default_next, local_only=local_only
    )
    logger.info("Session established, redirecting to %s", target)
    return CallbackOutcome(
        state=CallbackState.ESTABLISHED,
        redirect=RedirectDecision(target),
        session=result.session,
    )


async def run_signout(
    auth_service: AuthServiceProtocol,
    *,
    landing_path: str = LANDING_PATH,
) -> SignoutOutcome:
    """Sign out unconditionally and send the browser to the landing page.

    A reported error does not change the outcome; the dominant failure
    (session already gone) needs no corrective action. A service that
    raises is treated the same way.
    """
    try:
        result = await auth_service.sign_out()
    except Exception as exc:
        logger.debug("Sign-out raised, ignoring", exc_info=True)
        error: AuthError | None = AuthError(
            error_type="unexpected_error", message=repr(exc)
        )
    else:
        error = result.error
    return SignoutOutcome(
        state=SignoutState.SIGNED_OUT,
        redirect=RedirectDecision(landing_path),
        error=error,
    )
