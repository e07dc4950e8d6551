from __future__ import annotations

from datetime import timedelta

import pytest
from fastapi import Response
from jose import jwt

from saturday.core import security
from saturday.core.security import (
    InvalidSignature,
    MalformedToken,
    TokenExpired,
    create_access_token,
    issue_token,
    set_auth_cookie,
    verify_token,
)
from saturday.core.settings import settings
from saturday.models import School, User


def _user(user_id=7) -> User:
    return User(id=user_id, username="alice", email="alice@test.com", hashed_password="x")


def _school(school_id=3) -> School:
    return School(id=school_id, slug="test-school", name="Test University")


def test_issue_then_verify_round_trip():
    token = issue_token(_user(), _school())
    payload = verify_token(token)
    assert payload.user_id == 7
    assert payload.school_id == 3
    assert payload.school_slug == "test-school"
    assert payload.email == "alice@test.com"
    assert payload.username == "alice"
    assert not payload.is_expired


def test_token_without_school_carries_no_tenant():
    payload = verify_token(issue_token(_user(), None))
    assert payload.school_id is None
    assert payload.school_slug is None


def test_token_lifetime_defaults_to_seven_days():
    claims = jwt.get_unverified_claims(issue_token(_user(), _school()))
    assert claims["exp"] - claims["iat"] == 7 * 24 * 60 * 60
    assert claims["sub"] == "7"


@pytest.mark.parametrize(
    "user,school",
    [
        (User(username="ghost", email="ghost@test.com"), _school()),
        (_user(), School(slug="unsaved", name="Unsaved")),
    ],
)
def test_issue_token_requires_persisted_records(user, school):
    with pytest.raises(ValueError):
        issue_token(user, school)


def test_single_character_payload_tamper_is_invalid_signature():
    token = issue_token(_user(), _school())
    header, payload, signature = token.split(".")
    middle = len(payload) // 2
    replacement = "A" if payload[middle] != "A" else "B"
    tampered_payload = payload[:middle] + replacement + payload[middle + 1:]
    with pytest.raises(InvalidSignature):
        verify_token(".".join([header, tampered_payload, signature]))


def test_foreign_secret_is_invalid_signature():
    forged = jwt.encode({"sub": "7", "email": "a@b.c", "username": "a"}, "not-the-secret", algorithm="HS256")
    with pytest.raises(InvalidSignature):
        verify_token(forged)


def test_expired_token():
    token = issue_token(_user(), _school(), expires_delta=timedelta(seconds=-5))
    with pytest.raises(TokenExpired):
        verify_token(token)


@pytest.mark.parametrize("token", ["", "garbage", "a.b", "###.$$$.%%%"])
def test_unparseable_tokens_are_malformed(token):
    with pytest.raises(MalformedToken):
        verify_token(token)


def test_missing_identity_claims_are_malformed():
    token = create_access_token({"sub": "7"})
    with pytest.raises(MalformedToken):
        verify_token(token)


def test_all_failures_share_a_base_class():
    assert issubclass(InvalidSignature, security.TokenError)
    assert issubclass(TokenExpired, security.TokenError)
    assert issubclass(MalformedToken, security.TokenError)


def test_auth_cookie_attributes():
    response = Response()
    set_auth_cookie(response, "abc")
    header = response.headers["set-cookie"]
    assert header.startswith("auth_token=abc")
    assert "HttpOnly" in header
    assert "Max-Age=604800" in header
    assert "Path=/" in header
    assert "SameSite=lax" in header
    assert "Secure" not in header


def test_auth_cookie_secure_override(monkeypatch):
    monkeypatch.setattr(settings, "cookie_secure", True)
    response = Response()
    set_auth_cookie(response, "abc")
    assert "Secure" in response.headers["set-cookie"]


def test_cleared_cookie_header_expires_cookie():
    header = security.cleared_cookie_header()
    assert header.startswith("auth_token=")
    assert "Max-Age=0" in header
