"""Protocol defining the Auth Service interface.

Both StytchAuthService and MockAuthService implement this protocol,
allowing them to be used interchangeably by the request handlers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from pokemath.auth.models import ExchangeResult, SignOutResult


class AuthServiceProtocol(Protocol):
    """Protocol for request-scoped Auth Services.

    An implementation is bound to one request's session cookies and owns
    their persistence: a successful exchange attaches the session cookie,
    and sign-out clears it.
    """

    async def exchange_code_for_session(self, code: str) -> ExchangeResult:
        """Exchange an OAuth authorization code for a session.

        Args:
            code: The single-use authorization code from the provider redirect.

        Returns:
            ExchangeResult carrying either the session or the error.
        """
        ...

    async def sign_out(self) -> SignOutResult:
        """Terminate the session attached to the current request.

        Returns:
            SignOutResult with the error, if the provider reported one.
        """
        ...
