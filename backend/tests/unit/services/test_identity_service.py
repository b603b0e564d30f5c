"""Tests for IdentityService: registration, password change and profile images."""

from __future__ import annotations

import pytest
from sqlalchemy import func, select

from tests.factories.user import DEFAULT_PASSWORD, UserFactory
from tests.helpers.utils import media
from videotube.models import User
from videotube.services._shared.errors import (
    ConflictError,
    InternalError,
    InvalidCredentialsError,
    ValidationError,
)
from videotube.services.identity.dto import (
    UserImageUpdateIn,
    UserPasswordChangeIn,
    UserRegisterIn,
)
from videotube.services.identity.service import IdentityService


@pytest.fixture()
def service(media_storage) -> IdentityService:
    return IdentityService(media_storage=media_storage)


def _count_users(session) -> int:
    return session.execute(select(func.count(User.id))).scalar_one()


def _register_in(**overrides) -> UserRegisterIn:
    data = {
        "username": "Ana",
        "full_name": " Ana Ruiz ",
        "email": "Ana@Example.com",
        "password": "s3cret",
        "avatar": media("a.png"),
    }
    data.update(overrides)
    return UserRegisterIn(**data)


# ----------------------------- Registration ------------------------------- #
class TestRegister:
    def test_creates_user_with_uploaded_avatar(self, service, media_storage, session):
        out = service.register_user(_register_in(cover_image=media("c.jpg")))

        assert out.username == "ana"
        assert out.email == "ana@example.com"
        assert out.full_name == "Ana Ruiz"
        assert out.avatar.startswith("https://media.test/avatars/")
        assert out.cover_image.startswith("https://media.test/covers/")
        assert len(media_storage.objects) == 2
        assert not hasattr(out, "password_hash")
        assert not hasattr(out, "refresh_token")

        stored = session.get(User, out.id)
        assert stored.verify_password("s3cret")
        assert stored.refresh_token is None

    def test_cover_image_is_optional(self, service):
        assert service.register_user(_register_in()).cover_image is None

    @pytest.mark.parametrize("field", ["username", "full_name", "email", "password"])
    def test_blank_field_rejected(self, service, session, field):
        with pytest.raises(ValidationError, match="All fields are required"):
            service.register_user(_register_in(**{field: "   "}))
        assert _count_users(session) == 0

    def test_duplicate_username(self, service, session):
        UserFactory(username="ana")
        with pytest.raises(ConflictError, match="Username already exists"):
            service.register_user(_register_in(email="new@example.com"))
        assert _count_users(session) == 1

    def test_duplicate_email(self, service, session):
        UserFactory(email="ana@example.com")
        with pytest.raises(ConflictError, match="Email already exists"):
            service.register_user(_register_in(username="fresh"))
        assert _count_users(session) == 1

    def test_conflict_checked_before_avatar(self, service):
        UserFactory(username="ana")
        with pytest.raises(ConflictError):
            service.register_user(_register_in(avatar=None, email="x@example.com"))

    def test_avatar_required(self, service, session):
        with pytest.raises(ValidationError, match="Avatar file is required"):
            service.register_user(_register_in(avatar=None))
        assert _count_users(session) == 0

    def test_upload_failure(self, service, media_storage, session):
        media_storage.fail_uploads = True
        with pytest.raises(InternalError, match="Error while uploading avatar"):
            service.register_user(_register_in())
        assert _count_users(session) == 0

    def test_failed_insert_discards_uploads(self, service, media_storage):
        with pytest.raises(ValidationError):
            service.register_user(_register_in(email="broken@", cover_image=media("c.jpg")))
        assert media_storage.objects == {}

    def test_missing_storage(self, session):
        with pytest.raises(InternalError, match="Media storage is not configured"):
            IdentityService().register_user(_register_in())


# ---------------------------- Password change ----------------------------- #
class TestChangePassword:
    def test_new_password_replaces_old(self, service, session):
        user = UserFactory()
        service.change_password(
            UserPasswordChangeIn(user_id=user.id, old_password=DEFAULT_PASSWORD, new_password="n3w")
        )
        session.expire_all()
        stored = session.get(User, user.id)
        assert stored.verify_password("n3w")
        assert not stored.verify_password(DEFAULT_PASSWORD)

    def test_wrong_old_password(self, service, session):
        user = UserFactory()
        with pytest.raises(InvalidCredentialsError, match="Invalid old password"):
            service.change_password(
                UserPasswordChangeIn(user_id=user.id, old_password="nope", new_password="n3w")
            )
        session.expire_all()
        assert session.get(User, user.id).verify_password(DEFAULT_PASSWORD)

    def test_blank_passwords(self, service):
        user = UserFactory()
        with pytest.raises(ValidationError):
            service.change_password(
                UserPasswordChangeIn(user_id=user.id, old_password="", new_password="n3w")
            )


# ----------------------------- Profile images ----------------------------- #
class TestImages:
    def test_update_avatar(self, service, media_storage):
        user = UserFactory()
        previous = user.avatar
        out = service.update_avatar(UserImageUpdateIn(user_id=user.id, file=media("new.png")))
        assert out.avatar != previous
        assert out.avatar.startswith("https://media.test/avatars/")
        assert len(media_storage.objects) == 1

    def test_update_cover_image(self, service):
        user = UserFactory()
        out = service.update_cover_image(UserImageUpdateIn(user_id=user.id, file=media("c.jpg")))
        assert out.cover_image.startswith("https://media.test/covers/")

    def test_missing_files(self, service):
        user = UserFactory()
        with pytest.raises(ValidationError, match="Avatar file is missing"):
            service.update_avatar(UserImageUpdateIn(user_id=user.id, file=None))
        with pytest.raises(ValidationError, match="Cover image file is missing"):
            service.update_cover_image(UserImageUpdateIn(user_id=user.id, file=None))

    def test_upload_failure_keeps_previous_avatar(self, service, media_storage, session):
        user = UserFactory()
        previous = user.avatar
        media_storage.fail_uploads = True
        with pytest.raises(InternalError, match="Error while uploading avatar"):
            service.update_avatar(UserImageUpdateIn(user_id=user.id, file=media()))
        session.expire_all()
        assert session.get(User, user.id).avatar == previous
