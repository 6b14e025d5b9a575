"""Request-scoped session cookie jar.

The Auth Service reads the incoming session cookie from here and records
the cookie it wants set or cleared. The HTTP layer then applies the pending
change to whatever response it produces, so the service never touches the
response object itself.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from starlette.responses import Response


class SessionCookies:
    """Session cookie for a single request/response cycle."""

    def __init__(
        self,
        request_cookies: Mapping[str, str],
        name: str,
        *,
        max_age: int,
        secure: bool = False,
    ) -> None:
        self.name = name
        self._incoming = request_cookies.get(name) or None
        self._max_age = max_age
        self._secure = secure
        # None = untouched, "" = delete, otherwise the new value
        self._pending: str | None = None

    @property
    def session_token(self) -> str | None:
        """The session token visible to this request, including pending writes."""
        if self._pending is None:
            return self._incoming
        return self._pending or None

    @property
    def dirty(self) -> bool:
        return self._pending is not None

    def set_session(self, token: str) -> None:
        if not token:
            msg = "session token must not be empty"
            raise ValueError(msg)
        self._pending = token

    def clear_session(self) -> None:
        self._pending = ""

    def apply(self, response: Response) -> Response:
        """Write the pending cookie change onto the response."""
        if self._pending is None:
            return response
        if self._pending:
            response.set_cookie(
                self.name,
                self._pending,
                max_age=self._max_age,
                path="/",
                secure=self._secure,
                httponly=True,
                samesite="lax",
            )
        else:
            response.delete_cookie(
                self.name,
                path="/",
                secure=self._secure,
                httponly=True,
                samesite="lax",
            )
        return response
