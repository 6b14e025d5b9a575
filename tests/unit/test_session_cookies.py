"""Tests for the request-scoped SessionCookies jar."""

from __future__ import annotations

import pytest
from starlette.responses import Response

from pokemath.auth.cookies import SessionCookies


def _jar(incoming: dict[str, str] | None = None, *, secure: bool = False):
    return SessionCookies(incoming or {}, "sid", max_age=600, secure=secure)


class TestSessionToken:
    def test_reads_incoming_cookie(self):
        assert _jar({"sid": "abc"}).session_token == "abc"

    def test_ignores_other_cookies(self):
        assert _jar({"other": "abc"}).session_token is None

    def test_empty_cookie_is_absent(self):
        assert _jar({"sid": ""}).session_token is None

    def test_pending_write_wins(self):
        jar = _jar({"sid": "old"})
        jar.set_session("new")
        assert jar.session_token == "new"

    def test_pending_delete_wins(self):
        jar = _jar({"sid": "old"})
        jar.clear_session()
        assert jar.session_token is None
        assert jar.dirty is True

    def test_empty_token_rejected(self):
        with pytest.raises(ValueError, match="must not be empty"):
            _jar().set_session("")


class TestApply:
    def test_untouched_jar_writes_nothing(self):
        response = _jar({"sid": "abc"}).apply(Response())
        assert "set-cookie" not in response.headers

    def test_set_cookie_attributes(self):
        jar = _jar()
        jar.set_session("abc")

        header = jar.apply(Response()).headers["set-cookie"]

        assert header.startswith("sid=abc")
        assert "HttpOnly" in header
        assert "Max-Age=600" in header
        assert "Path=/" in header
        assert "samesite=lax" in header.lower()
        assert "Secure" not in header

    def test_secure_flag(self):
        jar = _jar(secure=True)
        jar.set_session("abc")

        assert "Secure" in jar.apply(Response()).headers["set-cookie"]

    def test_delete_cookie(self):
        jar = _jar({"sid": "abc"})
        jar.clear_session()

        header = jar.apply(Response()).headers["set-cookie"]

        assert header.startswith("sid=")
        assert "Max-Age=0" in header
