"""
IdentityService
===============

Service for the ``User`` aggregate outside of sessions:

- registration (with avatar/cover uploads and compensating cleanup)
- retrieval of the public representation
- password change
- avatar and cover image replacement
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from videotube.repositories.user import UserRepository
from videotube.services._shared.base import BaseService, ServiceContext
from videotube.services._shared.dto import UserPublicOut, user_to_public
from videotube.services._shared.errors import (
    ConflictError,
    InternalError,
    InvalidCredentialsError,
    NotFoundError,
    ValidationError,
    violates,
)
from videotube.services._shared.ports import (
    MediaFile,
    MediaStorage,
    MediaStorageError,
    StoredMedia,
)
from videotube.services.identity.dto import (
    UserImageUpdateIn,
    UserPasswordChangeIn,
    UserRegisterIn,
)

logger = logging.getLogger(__name__)

AVATAR_FOLDER = "avatars"
COVER_FOLDER = "covers"


class IdentityService(BaseService):
    """
    Application service for the ``User`` aggregate.

    Responsibilities
    ----------------
    - Register users ensuring username and email uniqueness.
    - Retrieve user data safely (no secrets).
    - Manage the password lifecycle.
    - Replace profile images through the media storage port.
    """

    def __init__(self, *, media_storage: MediaStorage | None = None, ctx: ServiceContext | None = None) -> None:
        """
        :param media_storage: Object store for avatars and cover images. Only
            registration and image updates need it.
        """
        super().__init__(ctx=ctx)
        self.media = media_storage

    # --------------------------------------------------------------------- #
    # Registration
    # --------------------------------------------------------------------- #

    def register_user(self, dto: UserRegisterIn) -> UserPublicOut:
        """
        Register a new user.

        Order: required fields, uniqueness, avatar presence, uploads, insert.
        When the insert fails after uploads, the uploaded objects are deleted
        and the original error propagates.

        :raises ValidationError: Blank field or missing avatar.
        :raises ConflictError: Username or email already taken.
        :raises InternalError: Upload failure.
        """
        fields = (dto.username, dto.full_name, dto.email, dto.password)
        if any(not isinstance(v, str) or not v.strip() for v in fields):
            raise ValidationError("All fields are required")

        with self.ro_uow() as uow:
            repo: UserRepository = uow.users
            if repo.exists_by_username(dto.username):
                raise ConflictError("User", "Username already exists")
            if repo.exists_by_email(dto.email):
                raise ConflictError("User", "Email already exists")

        if dto.avatar is None:
            raise ValidationError("Avatar file is required")

        uploaded: list[StoredMedia] = []
        avatar = self._upload(dto.avatar, AVATAR_FOLDER, "Error while uploading avatar")
        uploaded.append(avatar)
        cover: StoredMedia | None = None
        if dto.cover_image is not None:
            try:
                cover = self._upload(dto.cover_image, COVER_FOLDER, "Error while uploading cover image")
            except InternalError:
                self._discard(uploaded)
                raise
            uploaded.append(cover)

        try:
            with self.rw_uow() as uow:
                repo = uow.users
                user = repo.model(
                    username=dto.username,
                    full_name=dto.full_name,
                    email=dto.email,
                    avatar=avatar.url,
                    cover_image=cover.url if cover else None,
                )
                user.password = dto.password  # setter hashes
                repo.add(user)
                public = user_to_public(user)
        except IntegrityError as exc:
            self._discard(uploaded)
            if violates(exc, "uq_users_username") or violates(exc, "users.username"):
                raise ConflictError("User", "Username already exists") from exc
            if violates(exc, "uq_users_email") or violates(exc, "users.email"):
                raise ConflictError("User", "Email already exists") from exc
            raise
        except ValueError as exc:
            # model validators (e.g. malformed email)
            self._discard(uploaded)
            raise ValidationError(str(exc)) from exc
        except Exception:
            self._discard(uploaded)
            raise

        logger.info("identity.registered", extra={"user_id": public.id, "username": public.username})
        return public

    # --------------------------------------------------------------------- #
    # Password management
    # --------------------------------------------------------------------- #

    def change_password(self, dto: UserPasswordChangeIn) -> None:
        """
        Change a user's password after verifying the old one.

        :raises ValidationError: If either password is blank.
        :raises InvalidCredentialsError: When the old password does not match.
        """
        if not dto.old_password or not dto.new_password:
            raise ValidationError("Old and new passwords are required")

        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get(dto.user_id)
            if user is None:
                raise NotFoundError("User", dto.user_id, "User does not exist")
            if not user.verify_password(dto.old_password):
                raise InvalidCredentialsError("Invalid old password")
            repo.update_password(user, dto.new_password)

        logger.info("identity.password_changed", extra={"user_id": dto.user_id})

    # --------------------------------------------------------------------- #
    # Profile images
    # --------------------------------------------------------------------- #

    def update_avatar(self, dto: UserImageUpdateIn) -> UserPublicOut:
        """Replace the avatar URL. The previous object stays in the store."""
        if dto.file is None:
            raise ValidationError("Avatar file is missing")
        stored = self._upload(dto.file, AVATAR_FOLDER, "Error while uploading avatar")
        return self._set_image(dto.user_id, "avatar", stored)

    def update_cover_image(self, dto: UserImageUpdateIn) -> UserPublicOut:
        """Replace the cover image URL. The previous object stays in the store."""
        if dto.file is None:
            raise ValidationError("Cover image file is missing")
        stored = self._upload(dto.file, COVER_FOLDER, "Error while uploading cover image")
        return self._set_image(dto.user_id, "cover_image", stored)

    def _set_image(self, user_id: int, field: str, stored: StoredMedia) -> UserPublicOut:
        try:
            with self.rw_uow() as uow:
                repo: UserRepository = uow.users
                user = repo.get(user_id)
                if user is None:
                    raise NotFoundError("User", user_id, "User does not exist")
                repo.assign_updates(user, {field: stored.url})
                public = user_to_public(user)
        except Exception:
            self._discard([stored])
            raise
        logger.info("identity.image_updated", extra={"user_id": user_id, "field": field})
        return public

    # --------------------------------------------------------------------- #
    # Storage helpers
    # --------------------------------------------------------------------- #

    def _storage(self) -> MediaStorage:
        if self.media is None:
            raise InternalError("Media storage is not configured")
        return self.media

    def _upload(self, file: MediaFile, folder: str, message: str) -> StoredMedia:
        try:
            return self._storage().upload(file, folder=folder)
        except MediaStorageError as exc:
            logger.error("identity.upload_failed folder=%s", folder, exc_info=exc)
            raise InternalError(message) from exc

    def _discard(self, items: list[StoredMedia]) -> None:
        """Best-effort removal of objects uploaded for a failed write."""
        for item in items:
            try:
                self._storage().delete(item.key)
            except MediaStorageError as exc:
                logger.warning("identity.cleanup_failed key=%s", item.key, exc_info=exc)
