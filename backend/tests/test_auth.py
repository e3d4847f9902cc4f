from datetime import timedelta

import pytest
from jose import jwt

from tiffin.config import settings
from tiffin.errors import Conflict, Unauthenticated
from tiffin.services import auth
from tiffin.storage.models import Role


def test_password_hash_round_trip():
    hashed = auth.hash_password("demo123")
    assert hashed != "demo123"
    assert auth.verify_password("demo123", hashed)
    assert not auth.verify_password("wrong", hashed)
    assert not auth.verify_password("demo123", "not-a-bcrypt-hash")


def test_register_and_login(session):
    user, tokens = auth.register(session, "new@tiffin.com", "secret1", "New User")
    assert user.role == Role.USER
    assert set(tokens) == {"access_token", "refresh_token"}

    logged_in, _ = auth.login(session, "new@tiffin.com", "secret1")
    assert logged_in.id == user.id


def test_register_duplicate_email(session, user):
    with pytest.raises(Conflict):
        auth.register(session, user.email, "another1", "Dup")


@pytest.mark.parametrize("email,password", [("demo@tiffin.com", "wrong123"), ("nobody@tiffin.com", "demo123")])
def test_login_rejects_bad_credentials(session, user, email, password):
    with pytest.raises(Unauthenticated) as exc:
        auth.login(session, email, password)
    assert str(exc.value) == "Invalid credentials"


def test_principal_from_access_token(user):
    tokens = auth.issue_tokens(user)
    principal = auth.principal_from_token(tokens["access_token"])
    assert principal.id == user.id
    assert principal.role == Role.USER
    assert not principal.is_admin


def test_refresh_token_is_not_an_access_token(user):
    tokens = auth.issue_tokens(user)
    with pytest.raises(Unauthenticated):
        auth.principal_from_token(tokens["refresh_token"])


def test_refresh_issues_new_pair(session, user):
    tokens = auth.issue_tokens(user)
    fresh = auth.refresh(session, tokens["refresh_token"])
    assert auth.principal_from_token(fresh["access_token"]).id == user.id


def test_refresh_rejects_access_token(session, user):
    with pytest.raises(Unauthenticated):
        auth.refresh(session, auth.issue_tokens(user)["access_token"])


def test_expired_token(user, monkeypatch):
    monkeypatch.setattr(settings, "jwt_access_ttl_minutes", -1)
    token = auth.issue_tokens(user)["access_token"]
    with pytest.raises(Unauthenticated):
        auth.principal_from_token(token)


def test_token_signed_with_other_secret(user):
    forged = jwt.encode(
        {"sub": str(user.id), "role": "ADMIN", "type": "access"}, "not-the-secret", algorithm="HS256"
    )
    with pytest.raises(Unauthenticated):
        auth.principal_from_token(forged)


def test_token_lifetimes(user):
    claims = jwt.get_unverified_claims(auth.issue_tokens(user)["access_token"])
    assert timedelta(seconds=claims["exp"] - claims["iat"]) == timedelta(minutes=settings.jwt_access_ttl_minutes)
