from sqlalchemy.orm import relationship

from models.base_model import Base, BaseModel, PrincipalMixin
from models.principal import PrincipalKind


class Admin(PrincipalMixin, BaseModel, Base):
    __tablename__ = "admins"

    kind = PrincipalKind.ADMIN

    refresh_tokens = relationship(
        "RefreshToken",
        back_populates="admin",
        foreign_keys="RefreshToken.admin_id",
        cascade="all",
        passive_deletes=True,
    )

    def __repr__(self):
        return f"<Admin id={self.id} email={self.email}>"
