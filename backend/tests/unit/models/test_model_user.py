"""Tests for the User model."""

from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError

from videotube.models.user import User

AVATAR = "https://media.test/avatars/a.png"


def _user(**overrides) -> User:
    data = {
        "email": "ana@example.com",
        "username": "ana",
        "full_name": "Ana Ruiz",
        "avatar": AVATAR,
    }
    data.update(overrides)
    u = User(**data)
    u.password = "secret123"
    return u


class TestUser:
    def test_password_hashing(self, session):
        u = _user()
        session.add(u)
        session.commit()
        assert u.password_hash != "secret123"
        assert u.verify_password("secret123") is True
        assert u.verify_password("wrong") is False

    def test_password_is_write_only(self):
        u = _user()
        with pytest.raises(AttributeError):
            _ = u.password

    def test_same_password_hashes_differently(self):
        a, b = _user(), _user(username="bob", email="bob@example.com")
        assert a.password_hash != b.password_hash

    def test_empty_password_rejected(self):
        u = _user()
        with pytest.raises(ValueError):
            u.password = ""

    def test_identity_fields_normalized(self):
        u = _user(email="  Ana@Example.COM ", username="  AnA ", full_name="  Ana Ruiz ")
        assert u.email == "ana@example.com"
        assert u.username == "ana"
        assert u.full_name == "Ana Ruiz"

    def test_email_unique(self, session):
        session.add(_user())
        session.commit()

        session.add(_user(username="other"))
        with pytest.raises(IntegrityError):
            session.commit()
        session.rollback()

    def test_username_unique(self, session):
        session.add(_user())
        session.commit()

        session.add(_user(email="other@example.com"))
        with pytest.raises(IntegrityError):
            session.commit()
        session.rollback()

    def test_basic_validations(self):
        with pytest.raises(ValueError):
            _user(email="not-an-email")
        with pytest.raises(ValueError):
            _user(username="   ")
        with pytest.raises(ValueError):
            _user(full_name="")

    def test_refresh_token_starts_empty(self, session):
        u = _user()
        session.add(u)
        session.commit()
        assert u.refresh_token is None
        assert u.cover_image is None
