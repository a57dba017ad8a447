#!/usr/bin/env python3
"""
Shared SQLAlchemy base and mixins for the storefront API.

- Integer autoincrement primary key
- created_at timestamp (naive UTC, set in Python so every backend agrees)
- PrincipalMixin with the columns shared by admins and customers

Notes:
- Timestamps are naive UTC datetimes; SQLite drops tzinfo anyway, so comparing
  naive values everywhere keeps expiry checks consistent across backends.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Integer, String
from sqlalchemy.orm import declarative_base

# Declarative base for all models
Base = declarative_base()


def utcnow() -> datetime:
    """Current UTC time as a naive datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class BaseModel:
    """
    Base mixin for all persistent models.

    - id, created_at
    """

    id = Column(Integer, primary_key=True, autoincrement=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    def __init__(self, *args, **kwargs):
        """
        Allow attribute initialization via kwargs without requiring a session here.
        """
        for key, value in kwargs.items():
            if key != "__class__":
                setattr(self, key, value)


class PrincipalMixin:
    """
    Columns shared by every principal kind (admins and customers).

    Principals are never hard-deleted by the auth core; they are deactivated
    through ``is_active``.
    """

    kind = None  # set by subclasses to a PrincipalKind

    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    last_login = Column(DateTime, nullable=True)

    @property
    def password(self):
        raise AttributeError("Password: Write-only field")

    def touch_login(self, when: datetime | None = None) -> None:
        self.last_login = when or utcnow()
