from sqlalchemy.orm import relationship

from models.base_model import Base, BaseModel, PrincipalMixin
from models.principal import PrincipalKind


class Customer(PrincipalMixin, BaseModel, Base):
    __tablename__ = "customers"

    kind = PrincipalKind.CUSTOMER

    refresh_tokens = relationship(
        "RefreshToken",
        back_populates="customer",
        foreign_keys="RefreshToken.customer_id",
        cascade="all",
        passive_deletes=True,
    )

    def __repr__(self):
        return f"<Customer id={self.id} email={self.email}>"
