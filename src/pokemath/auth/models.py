"""Data models for authentication results.

These dataclasses represent the outcomes of the Auth Service operations,
providing a consistent interface between the real Stytch service and mock.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Session:
    """A session issued by the Auth Service after a code exchange.

    Attributes:
        session_token: Opaque token persisted in the session cookie.
        session_jwt: Short-lived JWT for client-side validation.
        member_id: The authenticated member's ID.
        organization_id: The organization the member authenticated into.
        email: The member's email address.
        expires_at: ISO-8601 expiry reported by the provider, if any.
    """

    session_token: str
    session_jwt: str | None = None
    member_id: str | None = None
    organization_id: str | None = None
    email: str | None = None
    expires_at: str | None = None


@dataclass(frozen=True)
class AuthError:
    """An error reported by the Auth Service.

    Attributes:
        error_type: Machine-readable error type (e.g. "invalid_code").
        message: Optional human-readable detail, for server-side logs only.
    """

    error_type: str
    message: str | None = None


@dataclass(frozen=True)
class ExchangeResult:
    """Result of exchanging an authorization code for a session."""

    session: Session | None = None
    error: AuthError | None = None

    def __post_init__(self) -> None:
        if (self.session is None) == (self.error is None):
            msg = "ExchangeResult requires exactly one of session or error"
            raise ValueError(msg)

    @property
    def success(self) -> bool:
        return self.session is not None


@dataclass(frozen=True)
class SignOutResult:
    """Result of terminating the current session."""

    error: AuthError | None = None

    @property
    def success(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class OAuthStartResult:
    """Result of starting an OAuth flow.

    Attributes:
        success: Whether the OAuth URL was generated.
        redirect_url: The URL to redirect the user to for OAuth.
        error: Error type if the operation failed.
    """

    success: bool
    redirect_url: str | None = None
    error: str | None = None
