from models.admin import Admin
from models.customer import Customer
from models.db_storage import DBStorage
from models.principal import PrincipalKind
from models.refresh_token import RefreshToken

# Principal = Admin | Customer, keyed by the token's "type" claim
PRINCIPAL_MODELS = {
    PrincipalKind.ADMIN: Admin,
    PrincipalKind.CUSTOMER: Customer,
}

__all__ = [
    "Admin",
    "Customer",
    "DBStorage",
    "PrincipalKind",
    "RefreshToken",
    "PRINCIPAL_MODELS",
]
