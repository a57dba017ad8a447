from datetime import datetime, timedelta, timezone

import jwt
import pytest

import utils.security as security
from api import create_app
from api.config import TestingConfig
from models import PrincipalKind
from utils.exceptions import InvalidToken
from utils.security import (
    check_secret,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


def test_hash_and_verify_password(app_ctx):
    digest = hash_password("Abcdefg1")
    assert digest.startswith("$argon2id$")
    assert "t=1" in digest  # testing cost factor
    assert verify_password("Abcdefg1", digest) is True
    assert verify_password("abcdefg1", digest) is False


def test_verify_password_with_malformed_digest_is_false(app_ctx):
    assert verify_password("Abcdefg1", "not-a-hash") is False
    assert verify_password("Abcdefg1", "") is False


@pytest.mark.parametrize("principal_id", [0, 1, 4242])
@pytest.mark.parametrize("kind", [PrincipalKind.ADMIN, PrincipalKind.CUSTOMER])
def test_access_token_round_trip(app_ctx, principal_id, kind):
    token = create_access_token(principal_id, kind, ttl=timedelta(minutes=5))
    claims = decode_access_token(token)
    assert claims.principal_id == principal_id
    assert claims.kind == kind.value


def test_access_token_defaults_to_configured_ttl(app, app_ctx):
    token = create_access_token(3, "admin")
    payload = jwt.decode(token, app.config["JWT_SECRET"], algorithms=["HS256"])
    assert payload["exp"] - payload["iat"] == 15 * 60
    assert payload["sub"] == "3"
    assert payload["type"] == "admin"


def test_expired_access_token_is_invalid(app_ctx, monkeypatch):
    past = datetime.now(timezone.utc) - timedelta(hours=1)
    monkeypatch.setattr(security, "_now", lambda: past)
    token = create_access_token(1, PrincipalKind.ADMIN, ttl=timedelta(minutes=15))
    monkeypatch.undo()

    with pytest.raises(InvalidToken):
        decode_access_token(token)


def test_tampered_and_foreign_tokens_are_invalid(app_ctx):
    token = create_access_token(1, PrincipalKind.CUSTOMER)
    head, body, sig = token.split(".")
    tampered = ".".join([head, body, sig[:-2] + ("AA" if sig[-2:] != "AA" else "BB")])
    foreign = jwt.encode(
        {"sub": "1", "type": "customer", "exp": datetime.now(timezone.utc) + timedelta(minutes=5)},
        "some-other-secret-that-is-long-enough-1234",
        algorithm="HS256",
    )

    for bad in (tampered, foreign, "garbage", ""):
        with pytest.raises(InvalidToken):
            decode_access_token(bad)


def test_token_with_non_numeric_subject_is_invalid(app, app_ctx):
    token = jwt.encode(
        {"sub": "abc", "type": "admin", "exp": datetime.now(timezone.utc) + timedelta(minutes=5)},
        app.config["JWT_SECRET"],
        algorithm="HS256",
    )
    with pytest.raises(InvalidToken):
        decode_access_token(token)


def test_sub_second_ttl_never_expires_at_issue(app, app_ctx, monkeypatch):
    issued = datetime(2026, 1, 1, 0, 0, 0, 200000, tzinfo=timezone.utc)
    monkeypatch.setattr(security, "_now", lambda: issued)
    token = create_access_token(1, PrincipalKind.ADMIN, ttl=timedelta(milliseconds=500))
    payload = jwt.decode(
        token, app.config["JWT_SECRET"], algorithms=["HS256"], options={"verify_exp": False}
    )
    assert payload["iat"] == int(issued.timestamp())
    assert payload["exp"] == payload["iat"] + 1
    assert payload["exp"] > issued.timestamp()


def test_sub_second_ttl_token_is_usable_right_away(app_ctx):
    for _ in range(20):
        token = create_access_token(7, PrincipalKind.CUSTOMER, ttl=timedelta(milliseconds=500))
        assert decode_access_token(token).principal_id == 7


def test_non_positive_ttl_is_rejected(app_ctx):
    with pytest.raises(ValueError):
        create_access_token(1, PrincipalKind.ADMIN, ttl=timedelta(0))


def test_short_secret_fails_fast(monkeypatch, storage):
    with pytest.raises(RuntimeError):
        check_secret("too-short")
    with pytest.raises(RuntimeError):
        check_secret(None)

    monkeypatch.setattr(TestingConfig, "JWT_SECRET", "x" * 31)
    with pytest.raises(RuntimeError):
        create_app("testing", storage=storage)
