"""Mock Auth Service for testing.

This module provides a mock implementation of the AuthServiceProtocol
that can be used in tests and e2e runs without making real Stytch API calls.

Supports arbitrary users - any email can be encoded into a mock code.
"""

from __future__ import annotations

import hashlib
from collections import deque
from typing import TYPE_CHECKING

from pokemath.auth.models import AuthError, ExchangeResult, Session, SignOutResult

if TYPE_CHECKING:
    from pokemath.auth.cookies import SessionCookies

# Predefined test values for consistent behavior in tests
MOCK_VALID_CODE = "mock-valid-code"
MOCK_CODE_PREFIX = "mock-code-"
MOCK_DEFAULT_EMAIL = "test@example.com"

MOCK_ORG_ID = "mock-org-123"

# Recent codes kept for assertions; a long-running dev server keeps only these
MAX_RECORDED_CODES = 100


def _email_to_member_id(email: str) -> str:
    """Generate a deterministic member ID from an email."""
    return f"mock-member-{hashlib.md5(email.encode()).hexdigest()[:8]}"


def _email_to_session_token(email: str) -> str:
    """Generate a deterministic session token from an email."""
    return f"mock-session-{hashlib.md5(email.encode()).hexdigest()[:12]}"


class MockSessionRegistry:
    """Process-wide session state shared by request-scoped MockAuthServices.

    Tracks live sessions and records every call for test assertions.
    """

    def __init__(self) -> None:
        # session_token -> Session
        self.sessions: dict[str, Session] = {}
        self.exchanged_codes: deque[str] = deque(maxlen=MAX_RECORDED_CODES)
        self.sign_out_calls = 0

    def clear(self) -> None:
        self.sessions.clear()
        self.exchanged_codes.clear()
        self.sign_out_calls = 0


class MockAuthService:
    """Mock implementation of AuthServiceProtocol for testing.

    Code Formats:
        - "mock-valid-code" - authenticates as test@example.com
        - "mock-code-{email}" - authenticates as specific email

    Anything else fails with "invalid_code".
    """

    def __init__(
        self,
        cookies: SessionCookies,
        registry: MockSessionRegistry | None = None,
    ) -> None:
        self._cookies = cookies
        self.registry = registry if registry is not None else MockSessionRegistry()

    async def exchange_code_for_session(self, code: str) -> ExchangeResult:
        """Mock exchanging an authorization code.

        Args:
            code: The mock authorization code.

        Returns:
            ExchangeResult - success for valid code formats.
        """
        self.registry.exchanged_codes.append(code)

        email: str | None = None
        if code.startswith(MOCK_CODE_PREFIX):
            email = code[len(MOCK_CODE_PREFIX) :] or None
        elif code == MOCK_VALID_CODE:
            email = MOCK_DEFAULT_EMAIL

        if email is None:
            return ExchangeResult(error=AuthError(error_type="invalid_code"))

        session = Session(
            session_token=_email_to_session_token(email),
            session_jwt=f"mock-jwt-{email}",
            member_id=_email_to_member_id(email),
            organization_id=MOCK_ORG_ID,
            email=email,
        )
        self.registry.sessions[session.session_token] = session
        self._cookies.set_session(session.session_token)
        return ExchangeResult(session=session)

    async def sign_out(self) -> SignOutResult:
        """Mock revoking the current session.

        Returns:
            SignOutResult - error if the cookie names no live session.
        """
        self.registry.sign_out_calls += 1
        session_token = self._cookies.session_token
        self._cookies.clear_session()

        if session_token is None or session_token not in self.registry.sessions:
            return SignOutResult(error=AuthError(error_type="session_not_found"))

        del self.registry.sessions[session_token]
        return SignOutResult()
