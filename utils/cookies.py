"""
Cookie transport for the session tokens.

access_token / refresh_token are HTTP-only; csrf_token is readable by scripts
so pages can mirror it into the x-csrf-token header.
"""
from __future__ import annotations

from datetime import timedelta

from flask import current_app

ACCESS_COOKIE = "access_token"
REFRESH_COOKIE = "refresh_token"
CSRF_COOKIE = "csrf_token"
CSRF_HEADER = "X-CSRF-Token"


def _set(response, name: str, value: str, max_age: timedelta, httponly: bool = True):
    response.set_cookie(
        name,
        value,
        max_age=int(max_age.total_seconds()),
        path="/",
        secure=current_app.config.get("COOKIE_SECURE", False),
        httponly=httponly,
        samesite="Lax",
    )


def set_auth_cookies(response, access_token: str, refresh_token: str, refresh_ttl: timedelta):
    _set(response, ACCESS_COOKIE, access_token, current_app.config["ACCESS_TOKEN_EXPIRES"])
    _set(response, REFRESH_COOKIE, refresh_token, refresh_ttl)


def clear_auth_cookies(response):
    for name in (ACCESS_COOKIE, REFRESH_COOKIE):
        response.delete_cookie(
            name,
            path="/",
            secure=current_app.config.get("COOKIE_SECURE", False),
            httponly=True,
            samesite="Lax",
        )


def set_csrf_cookie(response, token: str):
    _set(response, CSRF_COOKIE, token, current_app.config["CSRF_TOKEN_EXPIRES"], httponly=False)
