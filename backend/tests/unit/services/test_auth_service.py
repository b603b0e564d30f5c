"""Tests for AuthService: login, refresh rotation, logout and access checks."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy import select

from tests.factories.user import DEFAULT_PASSWORD, UserFactory
from videotube.models import User
from videotube.services._shared.errors import (
    InvalidCredentialsError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from videotube.services._shared.ports import ACCESS_TOKEN_TYPE, REFRESH_TOKEN_TYPE
from videotube.services.auth.dto import LoginIn, LoginOut, RefreshIn


def _stored_token(session, user_id: int) -> str | None:
    session.expire_all()
    return session.execute(select(User.refresh_token).where(User.id == user_id)).scalar_one()


# -------------------------------- Login ----------------------------------- #
def test_login_issues_pair_and_stores_refresh_token(auth_service, token_provider, session):
    user = UserFactory(username="ana", email="ana@example.com")

    out = auth_service.login(LoginIn(username="ana", password=DEFAULT_PASSWORD))

    assert isinstance(out, LoginOut)
    assert out.user.id == user.id
    claims = token_provider.decode(out.tokens.access_token, token_type=ACCESS_TOKEN_TYPE)
    assert claims["sub"] == str(user.id)
    assert claims["username"] == "ana"
    assert claims["email"] == "ana@example.com"
    assert claims["fullName"] == user.full_name
    assert _stored_token(session, user.id) == out.tokens.refresh_token


def test_login_by_email(auth_service):
    user = UserFactory(email="bob@example.com")
    out = auth_service.login(LoginIn(email="BOB@example.com", password=DEFAULT_PASSWORD))
    assert out.user.id == user.id


def test_login_unknown_user(auth_service):
    with pytest.raises(NotFoundError, match="User does not exist"):
        auth_service.login(LoginIn(username="ghost", password="x"))


def test_login_wrong_password(auth_service, session):
    user = UserFactory()
    with pytest.raises(InvalidCredentialsError, match="Invalid user credentials"):
        auth_service.login(LoginIn(username=user.username, password="wrong"))
    assert _stored_token(session, user.id) is None


def test_login_requires_identifier(auth_service):
    with pytest.raises(ValidationError, match="Username or email is required"):
        auth_service.login(LoginIn(password="x"))


def test_login_again_supersedes_previous_refresh_token(auth_service):
    user = UserFactory()
    first = auth_service.login(LoginIn(username=user.username, password=DEFAULT_PASSWORD))
    auth_service.login(LoginIn(username=user.username, password=DEFAULT_PASSWORD))

    with pytest.raises(UnauthorizedError):
        auth_service.refresh(RefreshIn(refresh_token=first.tokens.refresh_token))


# ------------------------------- Refresh ---------------------------------- #
def test_refresh_rotates_and_blocks_reuse(auth_service, session):
    """A -> B succeeds; presenting A again fails and B stays current."""
    user = UserFactory()
    pair_a = auth_service.login(LoginIn(username=user.username, password=DEFAULT_PASSWORD)).tokens

    pair_b = auth_service.refresh(RefreshIn(refresh_token=pair_a.refresh_token))
    assert pair_b.refresh_token != pair_a.refresh_token
    assert _stored_token(session, user.id) == pair_b.refresh_token

    with pytest.raises(UnauthorizedError, match="Invalid or expired refresh token"):
        auth_service.refresh(RefreshIn(refresh_token=pair_a.refresh_token))
    assert _stored_token(session, user.id) == pair_b.refresh_token


def test_refresh_requires_token(auth_service):
    with pytest.raises(ValidationError, match="Refresh token is required"):
        auth_service.refresh(RefreshIn(refresh_token="  "))


def test_refresh_rejects_access_token(auth_service):
    user = UserFactory()
    pair = auth_service.login(LoginIn(username=user.username, password=DEFAULT_PASSWORD)).tokens
    with pytest.raises(UnauthorizedError):
        auth_service.refresh(RefreshIn(refresh_token=pair.access_token))


def test_refresh_rejects_expired_token(auth_service):
    user = UserFactory()
    past = datetime.now(UTC) - timedelta(days=30)
    stale = auth_service.issue_refresh_token(user.id, now=past)
    with pytest.raises(UnauthorizedError):
        auth_service.refresh(RefreshIn(refresh_token=stale))


def test_refresh_rejects_garbage(auth_service):
    with pytest.raises(UnauthorizedError):
        auth_service.refresh(RefreshIn(refresh_token="not-a-jwt"))


# -------------------------------- Logout ---------------------------------- #
def test_logout_revokes_refresh(auth_service, session):
    user = UserFactory()
    pair = auth_service.login(LoginIn(username=user.username, password=DEFAULT_PASSWORD)).tokens

    auth_service.logout(user.id)

    assert _stored_token(session, user.id) is None
    with pytest.raises(UnauthorizedError):
        auth_service.refresh(RefreshIn(refresh_token=pair.refresh_token))


def test_logout_keeps_access_token_valid_until_expiry(auth_service):
    user = UserFactory()
    pair = auth_service.login(LoginIn(username=user.username, password=DEFAULT_PASSWORD)).tokens
    auth_service.logout(user.id)

    assert auth_service.authenticate_access_token(pair.access_token).id == user.id


# ---------------------------- Access tokens ------------------------------- #
def test_access_token_is_deterministic_for_fixed_clock(auth_service):
    user = UserFactory()
    now = datetime(2026, 1, 1, 12, 0, 0, 500, tzinfo=UTC)
    assert auth_service.issue_access_token(user, now=now) == auth_service.issue_access_token(user, now=now)


def test_refresh_tokens_differ_within_same_second(auth_service, token_provider):
    user = UserFactory()
    now = datetime(2026, 1, 1, 12, 0, 0, tzinfo=UTC)
    a = auth_service.issue_refresh_token(user.id, now=now)
    b = auth_service.issue_refresh_token(user.id, now=now)
    assert a != b
    assert token_provider.decode(a, token_type=REFRESH_TOKEN_TYPE)["sub"] == str(user.id)


def test_authenticate_access_token_failures(auth_service, session):
    with pytest.raises(UnauthorizedError, match="Unauthorized request"):
        auth_service.authenticate_access_token(None)
    with pytest.raises(UnauthorizedError, match="Invalid access token"):
        auth_service.authenticate_access_token("garbage")

    user = UserFactory()
    refresh = auth_service.issue_refresh_token(user.id)
    with pytest.raises(UnauthorizedError, match="Invalid access token"):
        auth_service.authenticate_access_token(refresh)

    token = auth_service.issue_access_token(user)
    session.delete(user)
    session.commit()
    with pytest.raises(UnauthorizedError, match="Invalid access token"):
        auth_service.authenticate_access_token(token)


def test_authenticate_returns_public_identity(auth_service):
    user = UserFactory()
    public = auth_service.authenticate_access_token(auth_service.issue_access_token(user))
    assert public.username == user.username
    assert not hasattr(public, "password_hash")
    assert not hasattr(public, "refresh_token")
