"""
Per-client request limits for the authentication endpoints.

Clients are keyed by remote address, which is the real client address once
ProxyFix is enabled (see TRUST_PROXY_HOPS). The limit string is read from
RATE_LIMIT on every request, e.g. "100 per minute".
"""
from flask import current_app
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

limiter = Limiter(key_func=get_remote_address)


def auth_rate_limit() -> str:
    return current_app.config["RATE_LIMIT"]
