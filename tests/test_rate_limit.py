from api import create_app
from api.config import TestingConfig
from models import Admin
from utils.security import digest_token

LOGIN = "/api/v1/admin/login"


def _csrf_headers(client):
    # bootstrap outside the limited blueprints
    client.get("/api/v1/health")
    return {"X-CSRF-Token": client.get_cookie("csrf_token").value}


def test_auth_endpoints_are_rate_limited(app, client):
    app.config["RATE_LIMIT"] = "3 per minute"
    headers = _csrf_headers(client)
    body = {"email": "nobody@x.com", "password": "Abcdefg1"}

    for _ in range(3):
        assert client.post(LOGIN, json=body, headers=headers).status_code == 401

    res = client.post(LOGIN, json=body, headers=headers)
    assert res.status_code == 429
    payload = res.get_json()
    assert payload["error"] == "RATE_LIMIT_EXCEEDED"
    assert payload["status"] == 429


def test_health_is_not_rate_limited(app, client):
    app.config["RATE_LIMIT"] = "1 per minute"
    for _ in range(3):
        assert client.get("/api/v1/health").status_code == 200


def test_forwarded_client_address_is_recorded_behind_proxy(monkeypatch, storage, make_principal):
    make_principal(Admin)
    monkeypatch.setattr(TestingConfig, "TRUST_PROXY_HOPS", 1)
    proxied = create_app("testing", storage=storage)
    client = proxied.test_client()
    forwarded = {"X-Forwarded-For": "203.0.113.7"}

    client.get("/api/v1/health", headers=forwarded)
    headers = {"X-CSRF-Token": client.get_cookie("csrf_token").value, **forwarded}
    res = client.post(LOGIN, json={"email": "a@x.com", "password": "Abcdefg1"}, headers=headers)
    assert res.status_code == 200

    with proxied.app_context():
        record = storage.find_by_token_hash(digest_token(client.get_cookie("refresh_token").value))
        assert record.ip == "203.0.113.7"


def test_forwarded_header_is_ignored_without_trusted_proxy(app, client, storage, make_principal):
    make_principal(Admin)
    forwarded = {"X-Forwarded-For": "203.0.113.7"}
    headers = {**_csrf_headers(client), **forwarded}
    res = client.post(LOGIN, json={"email": "a@x.com", "password": "Abcdefg1"}, headers=headers)
    assert res.status_code == 200

    with app.app_context():
        record = storage.find_by_token_hash(digest_token(client.get_cookie("refresh_token").value))
        assert record.ip == "127.0.0.1"
