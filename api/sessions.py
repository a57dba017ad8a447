"""
Session helpers shared by the admin and customer auth blueprints.

A session is the pair (access token, refresh family) delivered as cookies:
- start_session: register/login -> access token + new refresh family
- rotate_session: refresh cookie -> rotated refresh cookie + new access token
- end_session: refresh cookie -> family revoked, cookies cleared
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone

from flask import abort, current_app, jsonify, request

from models.base_model import utcnow
from models.schemas.auth import PrincipalOutSchema
from utils.cookies import REFRESH_COOKIE, clear_auth_cookies, set_auth_cookies
from utils.exceptions import AccountDeactivated, CredentialsInvalid, RefreshTokenRequired
from utils.refresh_tokens import RefreshTokenManager
from utils.security import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)

principal_out_schema = PrincipalOutSchema()


def get_storage():
    return current_app.extensions["storage"]


def get_refresh_manager() -> RefreshTokenManager:
    return current_app.extensions["refresh_tokens"]


def _client_meta():
    return {"user_agent": request.headers.get("User-Agent"), "ip": request.remote_addr}


def _access_expiry() -> str:
    expires = datetime.now(timezone.utc) + current_app.config["ACCESS_TOKEN_EXPIRES"]
    return expires.isoformat()


def register_principal(model, data: dict):
    """Create an Admin or Customer from validated register data."""
    storage = get_storage()
    if storage.find_by_email(model, data["email"]):
        abort(409, description=f"{model.__name__} with this email already exists")

    principal = model(
        name=data["name"],
        email=data["email"],
        password_hash=hash_password(data["password"]),
        is_active=True,
    )
    storage.new(principal)
    storage.save()
    logger.info("%s %s registered", principal.kind.value, principal.id)
    return principal


def authenticate(model, email: str, password: str):
    """Check credentials; unknown email and wrong password fail the same way."""
    principal = get_storage().find_by_email(model, email)
    if principal is None or not verify_password(password, principal.password_hash):
        raise CredentialsInvalid()
    if not principal.is_active:
        raise AccountDeactivated()
    return principal


def start_session(principal, status: int = 200):
    """Mint both tokens for ``principal`` and return the login response."""
    storage = get_storage()
    principal.touch_login(utcnow())
    storage.new(principal)
    storage.save()

    issued = get_refresh_manager().issue(principal, **_client_meta())
    access_token = create_access_token(principal.id, principal.kind)

    response = jsonify(
        {
            "data": {
                principal.kind.value: principal_out_schema.dump(principal),
                "token": access_token,
                "expiresAt": _access_expiry(),
            }
        }
    )
    response.status_code = status
    set_auth_cookies(response, access_token, issued.plaintext, issued.ttl)
    logger.info("%s %s signed in", principal.kind.value, principal.id)
    return response


def rotate_session():
    """Rotate the refresh cookie and mint an access token for its owner."""
    presented = request.cookies.get(REFRESH_COOKIE)
    if not presented:
        raise RefreshTokenRequired()

    rotated = get_refresh_manager().rotate(presented, **_client_meta())
    principal = rotated.principal
    access_token = create_access_token(principal.id, principal.kind)

    response = jsonify({"data": {"token": access_token, "expiresAt": _access_expiry()}})
    set_auth_cookies(response, access_token, rotated.plaintext, rotated.ttl)
    return response


def end_session():
    """Revoke the presented refresh family (if any) and clear the auth cookies."""
    presented = request.cookies.get(REFRESH_COOKIE)
    if presented:
        manager = get_refresh_manager()
        record = manager.find_by_plaintext(presented)
        if record is not None:
            manager.revoke_family(record.family_id)

    response = jsonify(
        {
            "data": {
                "message": "Successfully logged out",
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }
        }
    )
    clear_auth_cookies(response)
    return response
