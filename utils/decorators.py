from __future__ import annotations

import logging
from functools import wraps

from flask import current_app, g, request

from models import PRINCIPAL_MODELS, PrincipalKind
from utils.cookies import ACCESS_COOKIE
from utils.exceptions import (
    AccountDeactivated,
    AuthError,
    InvalidTokenType,
    PrincipalNotFound,
    TokenRequired,
)
from utils.security import decode_access_token

logger = logging.getLogger(__name__)


def extract_token() -> str | None:
    """Bearer token from the Authorization header, else the access_token cookie."""
    auth = request.headers.get("Authorization", "")
    parts = auth.split(" ")
    if len(parts) == 2 and parts[0] == "Bearer" and parts[1]:
        return parts[1]
    return request.cookies.get(ACCESS_COOKIE) or None


def resolve_principal(token: str, expected: PrincipalKind | None = None):
    """
    Verify an access token and load its principal.
    With ``expected`` set, a token of any other kind is rejected.
    """
    claims = decode_access_token(token)
    kind = PrincipalKind.parse(claims.kind)
    if kind is None or (expected is not None and kind is not expected):
        raise InvalidTokenType()

    storage = current_app.extensions["storage"]
    principal = storage.get(PRINCIPAL_MODELS[kind], claims.principal_id)
    if principal is None:
        raise PrincipalNotFound(f"{kind.value.capitalize()} not found", code=f"{kind.name}_NOT_FOUND")
    if not principal.is_active:
        raise AccountDeactivated()
    return principal


def auth_required(kind: PrincipalKind):
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            token = extract_token()
            if not token:
                raise TokenRequired()
            principal = resolve_principal(token, expected=kind)
            g.current_principal = principal
            g.principal_kind = kind
            return fn(*args, **kwargs)

        return wrapper

    return decorator


def admin_required():
    return auth_required(PrincipalKind.ADMIN)


def customer_required():
    return auth_required(PrincipalKind.CUSTOMER)


def optional_auth():
    """
    Resolve the caller if a usable token is present. Anonymous callers, bad
    tokens and lookup failures all continue with g.current_principal = None.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            g.current_principal = None
            g.principal_kind = None
            token = extract_token()
            if token:
                try:
                    principal = resolve_principal(token)
                except AuthError:
                    principal = None
                except Exception:
                    # store trouble degrades the caller to anonymous
                    logger.warning("optional auth could not resolve principal", exc_info=True)
                    principal = None
                if principal is not None:
                    g.current_principal = principal
                    g.principal_kind = principal.kind
            return fn(*args, **kwargs)

        return wrapper

    return decorator
