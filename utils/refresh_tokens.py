"""
Refresh token rotation.

Refresh tokens are opaque random secrets; only their SHA-256 digest is stored.
Every login starts a *family*; every refresh revokes the presented record and
creates its successor in the same family. Presenting a record that is already
revoked means the secret was replayed, so the whole family is revoked.

    issue()  -> family root
    rotate() -> Active -> Rotated, successor Active
    revoke_family() -> every Active record in the family -> Revoked
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import timedelta
from typing import Callable, Optional

from models import PRINCIPAL_MODELS, PrincipalKind, RefreshToken
from models.base_model import utcnow
from models.db_storage import DBStorage
from utils.exceptions import (
    AccountDeactivated,
    InvalidRefreshToken,
    RefreshTokenExpired,
    RefreshTokenReuseDetected,
)
from utils.security import digest_token, generate_secret

logger = logging.getLogger(__name__)

DEFAULT_TTL = timedelta(days=7)
SECRET_BYTES = 48


@dataclass(frozen=True)
class IssuedToken:
    plaintext: str
    family_id: str
    ttl: timedelta
    record_id: int


@dataclass(frozen=True)
class RotationResult:
    plaintext: str
    ttl: timedelta
    principal: object
    family_id: str


def _clip(value: Optional[str], size: int) -> Optional[str]:
    return value[:size] if value else None


class RefreshTokenManager:
    def __init__(self, storage: DBStorage, ttl: timedelta = DEFAULT_TTL,
                 clock: Callable = utcnow):
        self.storage = storage
        self.ttl = ttl
        self.clock = clock

    def _new_record(self, owner_kind: PrincipalKind, owner_id: int, family_id: str,
                    user_agent: Optional[str], ip: Optional[str]):
        plaintext = generate_secret(SECRET_BYTES)
        record = RefreshToken(
            admin_id=owner_id if owner_kind is PrincipalKind.ADMIN else None,
            customer_id=owner_id if owner_kind is PrincipalKind.CUSTOMER else None,
            family_id=family_id,
            token_hash=digest_token(plaintext),
            user_agent=_clip(user_agent, 255),
            ip=_clip(ip, 64),
            created_at=self.clock(),
            expires_at=self.clock() + self.ttl,
        )
        self.storage.create_record(record)
        return plaintext, record

    def issue(self, principal, user_agent: Optional[str] = None,
              ip: Optional[str] = None) -> IssuedToken:
        """Start a new family for ``principal`` and return its first secret."""
        family_id = uuid.uuid4().hex
        plaintext, record = self._new_record(principal.kind, principal.id, family_id, user_agent, ip)
        self.storage.save()
        logger.info("refresh family %s issued for %s %s", family_id, principal.kind.value, principal.id)
        return IssuedToken(plaintext=plaintext, family_id=family_id, ttl=self.ttl, record_id=record.id)

    def find_by_plaintext(self, plaintext: str) -> Optional[RefreshToken]:
        if not plaintext:
            return None
        return self.storage.find_by_token_hash(digest_token(plaintext))

    def revoke_family(self, family_id: str) -> int:
        """Revoke every live record in the family. Safe to call repeatedly."""
        count = self.storage.bulk_revoke_family(family_id, self.clock())
        logger.info("refresh family %s revoked (%d records)", family_id, count)
        return count

    def _reuse_detected(self, record: RefreshToken):
        count = self.storage.bulk_revoke_family(record.family_id, self.clock())
        logger.warning(
            "refresh token reuse detected: record %s, family %s revoked (%d records)",
            record.id, record.family_id, count,
        )
        return RefreshTokenReuseDetected()

    def rotate(self, plaintext: str, user_agent: Optional[str] = None,
               ip: Optional[str] = None) -> RotationResult:
        """
        Exchange a refresh secret for its successor.

        Raises InvalidRefreshToken for unknown secrets, RefreshTokenReuseDetected
        (after revoking the family) for revoked ones, RefreshTokenExpired for
        expired ones.
        """
        record = self.find_by_plaintext(plaintext)
        if record is None:
            raise InvalidRefreshToken()
        if record.is_revoked:
            raise self._reuse_detected(record)

        now = self.clock()
        if record.is_expired(now):
            raise RefreshTokenExpired()

        principal = self.storage.get(PRINCIPAL_MODELS[record.owner_kind], record.owner_id)
        if principal is None:
            raise InvalidRefreshToken()
        if not principal.is_active:
            raise AccountDeactivated()

        # revoke first; losing the race means another rotation already spent it
        if not self.storage.conditional_revoke(record.id, now):
            self.storage.rollback()
            raise self._reuse_detected(record)

        new_plaintext, successor = self._new_record(
            record.owner_kind, record.owner_id, record.family_id, user_agent, ip
        )
        self.storage.link_replacement(record.id, successor.id)
        principal.touch_login(now)
        self.storage.save()
        logger.info("refresh token %s rotated to %s in family %s", record.id, successor.id, record.family_id)
        return RotationResult(plaintext=new_plaintext, ttl=self.ttl, principal=principal, family_id=record.family_id)
