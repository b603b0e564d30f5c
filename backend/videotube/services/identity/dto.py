"""
DTOs for IdentityService.

Data Transfer Objects isolate the service layer from ORM models and from the
web framework's file objects.
"""

from __future__ import annotations

from dataclasses import dataclass

from videotube.services._shared.dto import UserPublicOut
from videotube.services._shared.ports import MediaFile

# --------------------------------------------------------------------------- #
# Input DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class UserRegisterIn:
    """
    Input DTO for user registration.

    :param username: Public handle (stored lower-cased).
    :type username: str
    :param full_name: Display name.
    :type full_name: str
    :param email: Login email (stored lower-cased).
    :type email: str
    :param password: Raw password to be hashed by the model.
    :type password: str
    :param avatar: Avatar image (required).
    :type avatar: MediaFile | None
    :param cover_image: Optional cover image.
    :type cover_image: MediaFile | None
    """

    username: str
    full_name: str
    email: str
    password: str
    avatar: MediaFile | None = None
    cover_image: MediaFile | None = None


@dataclass(frozen=True, slots=True)
class UserPasswordChangeIn:
    """
    Input DTO for changing a user's password.

    :param user_id: User identifier.
    :type user_id: int
    :param old_password: Current password.
    :type old_password: str
    :param new_password: New password (raw).
    :type new_password: str
    """

    user_id: int
    old_password: str
    new_password: str


@dataclass(frozen=True, slots=True)
class UserImageUpdateIn:
    """
    Input DTO for replacing the avatar or the cover image.

    :param user_id: User identifier.
    :type user_id: int
    :param file: New image, ``None`` when the request carried no file.
    :type file: MediaFile | None
    """

    user_id: int
    file: MediaFile | None


__all__ = [
    "UserRegisterIn",
    "UserPasswordChangeIn",
    "UserImageUpdateIn",
    "UserPublicOut",
]
