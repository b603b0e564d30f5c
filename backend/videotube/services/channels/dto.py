from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ChannelProfileIn:
    """
    :param username: Channel handle as typed by the client.
    :param viewer_id: Authenticated requester, used for ``is_subscribed``.
    """

    username: str | None
    viewer_id: int | None


@dataclass(frozen=True, slots=True)
class ChannelProfileOut:
    """Public channel profile with subscription aggregates."""

    id: int
    username: str
    email: str
    full_name: str
    avatar: str
    cover_image: str | None
    subscribers_count: int
    channels_subscribed_to_count: int
    is_subscribed: bool
