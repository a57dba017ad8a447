"""
Principal kinds.

A principal is either an Admin or a Customer; the access token ``type`` claim
carries the kind and is the discriminant the guards check.
"""
from __future__ import annotations

import enum


class PrincipalKind(str, enum.Enum):
    ADMIN = "admin"
    CUSTOMER = "customer"

    @classmethod
    def parse(cls, value) -> "PrincipalKind | None":
        try:
            return cls(value)
        except ValueError:
            return None
