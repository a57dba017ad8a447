"""
Double-submit CSRF protection.

Every response to a client without a csrf_token cookie mints one. Unsafe
requests (POST, PUT, PATCH, DELETE) must echo the cookie value in the
x-csrf-token header.
"""
from __future__ import annotations

import hmac
import secrets

from flask import g, request

from utils.cookies import CSRF_COOKIE, CSRF_HEADER, set_csrf_cookie
from utils.exceptions import CsrfMismatch

UNSAFE_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})


def generate_csrf_token() -> str:
    return secrets.token_hex(20)


def tokens_match(cookie_token: str | None, header_token: str | None) -> bool:
    if not cookie_token or not header_token:
        return False
    return hmac.compare_digest(cookie_token.encode("utf-8"), header_token.encode("utf-8"))


def current_csrf_token() -> str:
    """Token the client holds, or the one this response is about to set."""
    return g.csrf_token


def init_csrf(app):
    @app.before_request
    def _csrf_protect():
        cookie_token = request.cookies.get(CSRF_COOKIE)
        g.csrf_token_new = cookie_token is None
        g.csrf_token = cookie_token or generate_csrf_token()

        if request.method in UNSAFE_METHODS:
            if not tokens_match(cookie_token, request.headers.get(CSRF_HEADER)):
                raise CsrfMismatch()

    @app.after_request
    def _csrf_issue(response):
        if g.get("csrf_token_new"):
            set_csrf_cookie(response, g.csrf_token)
        return response
