"""Pytest configuration for all tests."""
from datetime import datetime, timedelta

import pytest

from api import create_app
from models import Admin, Customer, DBStorage
from utils.refresh_tokens import RefreshTokenManager
from utils.security import hash_password

PASSWORD = "Abcdefg1"


class FakeClock:
    """Naive-UTC clock the tests can move by hand."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


@pytest.fixture
def storage():
    store = DBStorage("sqlite://")
    store.reload()
    yield store
    store.close()


@pytest.fixture
def app(storage):
    return create_app("testing", storage=storage)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def app_ctx(app):
    with app.app_context():
        yield


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 1, 1, 12, 0, 0))


@pytest.fixture
def manager(storage, clock):
    return RefreshTokenManager(storage, ttl=timedelta(days=7), clock=clock)


@pytest.fixture
def make_principal(app, storage):
    """Create an Admin or Customer directly in the store and return its id."""
    def _make(model=Admin, email="a@x.com", name="Ada Admin", active=True):
        with app.app_context():
            principal = model(
                name=name,
                email=email,
                password_hash=hash_password(PASSWORD),
                is_active=active,
            )
            storage.new(principal)
            storage.save()
            return principal.id

    return _make


@pytest.fixture
def admin(app_ctx, storage):
    principal = Admin(name="Ada Admin", email="a@x.com", password_hash=hash_password(PASSWORD), is_active=True)
    storage.new(principal)
    storage.save()
    return principal


@pytest.fixture
def customer(app_ctx, storage):
    principal = Customer(name="Carl Customer", email="c@x.com", password_hash=hash_password(PASSWORD), is_active=True)
    storage.new(principal)
    storage.save()
    return principal


@pytest.fixture
def csrf():
    """Return X-CSRF-Token headers for a client, bootstrapping the cookie if needed."""
    def _headers(client):
        cookie = client.get_cookie("csrf_token")
        if cookie is None:
            client.get("/api/v1/auth/csrf-token")
            cookie = client.get_cookie("csrf_token")
        return {"X-CSRF-Token": cookie.value}

    return _headers
