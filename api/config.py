"""
Environment-aware configuration.
Values come from the process environment (and .env when present).
"""
import os
from dotenv import load_dotenv
from datetime import timedelta

load_dotenv()  # Read .env if present


def _bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes")


def _origins(raw: str) -> list:
    return [o.strip() for o in raw.split(",") if o.strip()]


class BaseConfig:
    DEBUG = False
    TESTING = False
    APP_ENV = os.getenv("APP_ENV", "dev")
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///storefront.db")
    DB_TIMEOUT_SECONDS = int(os.getenv("DB_TIMEOUT_SECONDS", "10"))
    SQL_ECHO = _bool("SQL_ECHO", "false")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    # Cookie-bearing cross-origin calls are only allowed from these origins
    ALLOWED_ORIGINS = _origins(os.getenv("ALLOWED_ORIGINS", "http://localhost:3000"))

    # Access tokens (JWT)
    JWT_SECRET = os.getenv("JWT_SECRET")
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_ISSUER = os.getenv("JWT_ISSUER", "storefront-api")
    ACCESS_TOKEN_EXPIRES = timedelta(hours=float(os.getenv("JWT_EXPIRES_HOURS", "0.25")))

    # Refresh tokens and CSRF cookie
    REFRESH_TOKEN_EXPIRES = timedelta(days=int(os.getenv("REFRESH_TOKEN_EXPIRES_DAYS", "7")))
    CSRF_TOKEN_EXPIRES = timedelta(days=7)
    COOKIE_SECURE = _bool("COOKIE_SECURE", "false")

    # Argon2 work factors
    PASSWORD_HASH_TIME_COST = int(os.getenv("PASSWORD_HASH_TIME_COST", "3"))
    PASSWORD_HASH_MEMORY_COST = int(os.getenv("PASSWORD_HASH_MEMORY_COST", "65536"))

    # Flask-Limiter: per-client limit on the auth blueprints
    RATE_LIMIT = os.getenv("RATE_LIMIT", "100 per minute")
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")
    RATELIMIT_HEADERS_ENABLED = True

    # Number of reverse proxies whose X-Forwarded-For/Proto headers are trusted
    TRUST_PROXY_HOPS = int(os.getenv("TRUST_PROXY_HOPS", "0"))


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    JWT_SECRET = os.getenv("JWT_SECRET", "dev-secret-change-me-dev-secret-change-me")
    # In dev, propagate exceptions so our error handler has full context
    PROPAGATE_EXCEPTIONS = True


class ProductionConfig(BaseConfig):
    DEBUG = False
    COOKIE_SECURE = _bool("COOKIE_SECURE", "true")
    TRUST_PROXY_HOPS = int(os.getenv("TRUST_PROXY_HOPS", "1"))


class TestingConfig(BaseConfig):
    TESTING = True
    DATABASE_URL = "sqlite://"
    JWT_SECRET = "test-secret-test-secret-test-secret-0123"
    COOKIE_SECURE = False
    PASSWORD_HASH_TIME_COST = 1
    PASSWORD_HASH_MEMORY_COST = 64
    ALLOWED_ORIGINS = ["http://localhost:3000"]
    RATE_LIMIT = "1000 per minute"
    RATELIMIT_STORAGE_URI = "memory://"
    TRUST_PROXY_HOPS = 0


def get_config(name: str | None):
    """
    Select config class.
    - If name is provided, choose by name.
    - Else choose based on APP_ENV (dev/prod/test).
    """
    env = (name or os.getenv("APP_ENV", "dev")).lower()
    if env in ["prod", "production"]:
        return ProductionConfig
    if env in ["test", "testing"]:
        return TestingConfig
    return DevelopmentConfig
