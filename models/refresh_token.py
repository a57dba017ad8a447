"""
RefreshToken model: one link in a rotation chain.

Fields:
- admin_id XOR customer_id (owner), enforced by a CHECK constraint; records
  are deleted together with their owner
- family_id shared by every token descended from one login
- token_hash: SHA-256 of the bearer secret (the secret itself is never stored)
- user_agent, ip: client metadata kept for auditing
- expires_at, revoked_at
- replaced_by_id: successor created when this token was rotated
"""
from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from models.base_model import Base, BaseModel
from models.principal import PrincipalKind


class RefreshToken(BaseModel, Base):
    __tablename__ = "refresh_tokens"
    __table_args__ = (
        CheckConstraint(
            "(admin_id IS NULL) <> (customer_id IS NULL)",
            name="ck_refresh_tokens_single_owner",
        ),
    )

    admin_id = Column(Integer, ForeignKey("admins.id", ondelete="CASCADE"), nullable=True, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id", ondelete="CASCADE"), nullable=True, index=True)
    family_id = Column(String(64), nullable=False, index=True)
    token_hash = Column(String(255), nullable=False, unique=True, index=True)
    user_agent = Column(String(255), nullable=True)
    ip = Column(String(64), nullable=True)
    expires_at = Column(DateTime, nullable=False, index=True)
    revoked_at = Column(DateTime, nullable=True)
    replaced_by_id = Column(Integer, ForeignKey("refresh_tokens.id", ondelete="SET NULL"), nullable=True)

    admin = relationship("Admin", back_populates="refresh_tokens", foreign_keys=[admin_id])
    customer = relationship("Customer", back_populates="refresh_tokens", foreign_keys=[customer_id])

    @property
    def owner_kind(self) -> PrincipalKind:
        return PrincipalKind.ADMIN if self.admin_id is not None else PrincipalKind.CUSTOMER

    @property
    def owner_id(self) -> int:
        return self.admin_id if self.admin_id is not None else self.customer_id

    @property
    def is_revoked(self) -> bool:
        return self.revoked_at is not None

    def is_expired(self, now) -> bool:
        return self.expires_at <= now

    def __repr__(self):
        return f"<RefreshToken id={self.id} family={self.family_id} revoked={self.is_revoked}>"
