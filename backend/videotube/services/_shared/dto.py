# comments in English; reST docstrings strict
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class WindowIn:
    """
    Optional pagination contract.

    :param page: 1-based page number.
    :type page: int | None
    :param limit: Page size; ``None`` disables windowing.
    :type limit: int | None
    """

    page: int | None = None
    limit: int | None = None


@dataclass(frozen=True, slots=True)
class UserPublicOut:
    """
    Client-safe user representation.

    Never carries the password hash nor the refresh token.

    :param id: User id.
    :param username: Lower-cased handle.
    :param email: Lower-cased email.
    :param full_name: Display name.
    :param avatar: Avatar URL.
    :param cover_image: Cover image URL, if any.
    :param created_at: Creation timestamp.
    :param updated_at: Last update timestamp.
    """

    id: int
    username: str
    email: str
    full_name: str
    avatar: str
    cover_image: str | None
    created_at: datetime | None = None
    updated_at: datetime | None = None


def user_to_public(user) -> UserPublicOut:
    """Project a :class:`~videotube.models.user.User` onto :class:`UserPublicOut`."""
    return UserPublicOut(
        id=user.id,
        username=user.username,
        email=user.email,
        full_name=user.full_name,
        avatar=user.avatar,
        cover_image=user.cover_image,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )
