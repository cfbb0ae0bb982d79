"""Token service unit tests — no app, no database."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from bookshelf.auth.jwt import Principal, TokenService
from bookshelf.config import Settings
from bookshelf.errors import ConfigError, InvalidTokenError

SECRET = "unit-test-secret"
ALICE = Principal(id=7, email="alice@example.com", name="Alice")


@pytest.fixture()
def svc():
    return TokenService(SECRET)


def test_issue_then_verify_returns_issued_claims(svc):
    claims = svc.verify(svc.issue(ALICE))
    assert claims.to_principal() == ALICE
    assert (claims.id, claims.email, claims.name) == (7, "alice@example.com", "Alice")


def test_token_expires_six_hours_after_issue(svc):
    issued = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
    payload = jwt.decode(
        svc.issue(ALICE, now=issued),
        SECRET,
        algorithms=["HS256"],
        options={"verify_exp": False},
    )
    assert payload["exp"] - payload["iat"] == 6 * 3600
    assert payload["iat"] == int(issued.timestamp())


def test_token_uses_hs256(svc):
    header = jwt.get_unverified_header(svc.issue(ALICE))
    assert header["alg"] == "HS256"


def test_expired_token_rejected(svc):
    stale = svc.issue(ALICE, now=datetime.now(timezone.utc) - timedelta(hours=6, seconds=1))
    with pytest.raises(InvalidTokenError, match="expired"):
        svc.verify(stale)


def test_token_just_inside_lifetime_accepted(svc):
    recent = svc.issue(ALICE, now=datetime.now(timezone.utc) - timedelta(hours=5, minutes=59))
    assert svc.verify(recent).id == ALICE.id


def test_wrong_secret_rejected(svc):
    other = TokenService("another-secret").issue(ALICE)
    with pytest.raises(InvalidTokenError):
        svc.verify(other)


def test_tampered_payload_rejected(svc):
    header, payload, signature = svc.issue(ALICE).split(".")
    forged_payload = TokenService(SECRET).issue(
        Principal(id=1, email="root@example.com", name="Root")
    ).split(".")[1]
    with pytest.raises(InvalidTokenError):
        svc.verify(".".join([header, forged_payload, signature]))


@pytest.mark.parametrize("token", ["", "garbage", "a.b.c"])
def test_malformed_token_rejected(svc, token):
    with pytest.raises(InvalidTokenError):
        svc.verify(token)


def test_token_without_identity_claims_rejected(svc):
    now = datetime.now(timezone.utc)
    token = jwt.encode(
        {"sub": "7", "iat": now, "exp": now + timedelta(hours=1)}, SECRET, algorithm="HS256"
    )
    with pytest.raises(InvalidTokenError, match="identity claims"):
        svc.verify(token)


def test_token_without_expiry_rejected(svc):
    token = jwt.encode({"id": 7, "email": "a@b.com", "name": "A"}, SECRET, algorithm="HS256")
    with pytest.raises(InvalidTokenError):
        svc.verify(token)


def test_empty_secret_is_a_config_error():
    with pytest.raises(ConfigError):
        TokenService("")


def test_from_settings_requires_secret():
    with pytest.raises(ConfigError):
        TokenService.from_settings(Settings(token_secret="", environment="development"))


def test_from_settings_reads_lifetime():
    svc = TokenService.from_settings(
        Settings(token_secret="s3cret", token_expire_hours=1, environment="development")
    )
    assert svc.lifetime == timedelta(hours=1)


def test_settings_refuse_missing_secret_in_production():
    with pytest.raises(ValueError):
        Settings(token_secret="", environment="production")
