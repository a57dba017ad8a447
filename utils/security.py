"""
security helpers:
- Argon2 password hashing via argon2-cffi (cost factors from app config)
- Access token creation/verification via PyJWT
- Secret generation and digests for refresh and CSRF tokens
"""
from __future__ import annotations

import hashlib
import math
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

from flask import current_app

from models.principal import PrincipalKind
from utils.exceptions import InvalidToken

MIN_SECRET_LENGTH = 32


@dataclass(frozen=True)
class AccessClaims:
    principal_id: int
    kind: str


def build_password_hasher(config) -> PasswordHasher:
    """Argon2id hasher with the configured work factors."""
    return PasswordHasher(
        time_cost=config.get("PASSWORD_HASH_TIME_COST", 3),
        memory_cost=config.get("PASSWORD_HASH_MEMORY_COST", 65536),
    )


def _hasher() -> PasswordHasher:
    return current_app.extensions["password_hasher"]


def hash_password(password: str) -> str:
    """Hash a plaintext password using Argon2
    """
    return _hasher().hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """ Verify a plaintext password using argon2; malformed hashes never match.
    """
    try:
        return _hasher().verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False


def generate_secret(nbytes: int = 48) -> str:
    """Unguessable hex secret with nbytes of entropy."""
    return secrets.token_hex(nbytes)


def digest_token(plaintext: str) -> str:
    """One-way SHA-256 digest used to store and look up refresh tokens."""
    return hashlib.sha256(plaintext.encode("utf-8")).hexdigest()


def _now() -> datetime:
    return datetime.now(timezone.utc)


def create_access_token(principal_id: int, kind, ttl: timedelta | None = None) -> str:
    """
    Signed short-lived token for one principal. ``kind`` is a PrincipalKind
    (or its string value) and becomes the ``type`` claim.
    """
    ttl = ttl if ttl is not None else current_app.config["ACCESS_TOKEN_EXPIRES"]
    if ttl <= timedelta(0):
        raise ValueError("access token ttl must be positive")
    kind = PrincipalKind(kind)
    issued = _now()
    payload = {
        "iss": current_app.config.get("JWT_ISSUER", "storefront-api"),
        "sub": str(principal_id),
        "type": kind.value,
        "iat": int(issued.timestamp()),
        "exp": math.ceil((issued + ttl).timestamp()),
    }
    return jwt.encode(payload, current_app.config["JWT_SECRET"], algorithm=current_app.config["JWT_ALGORITHM"])


def decode_access_token(token: str) -> AccessClaims:
    """
    Decode and validate an access token.
    Raises InvalidToken on bad signature, expiry or malformed claims.
    """
    try:
        decoded = jwt.decode(
            token,
            current_app.config["JWT_SECRET"],
            algorithms=[current_app.config["JWT_ALGORITHM"]],
            options={"require": ["exp", "sub", "type"]},
        )
    except jwt.InvalidTokenError as exc:
        raise InvalidToken() from exc

    try:
        principal_id = int(decoded["sub"])
    except (TypeError, ValueError) as exc:
        raise InvalidToken() from exc
    if principal_id < 0 or not isinstance(decoded["type"], str):
        raise InvalidToken()
    return AccessClaims(principal_id=principal_id, kind=decoded["type"])


def check_secret(secret: str | None) -> None:
    """Refuse to start with a missing or short signing secret."""
    if not secret or len(secret) < MIN_SECRET_LENGTH:
        raise RuntimeError(f"JWT_SECRET must be at least {MIN_SECRET_LENGTH} characters long")
