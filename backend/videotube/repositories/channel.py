"""Channel profile read model: one query, counts computed in SQL."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import Select, exists, func, select

from videotube.models.subscription import Subscription
from videotube.models.user import User
from videotube.repositories.base import SessionBound


@dataclass(frozen=True, slots=True)
class ChannelProfileRow:
    id: int
    username: str
    email: str
    full_name: str
    avatar: str
    cover_image: str | None
    subscribers_count: int
    channels_subscribed_to_count: int
    is_subscribed: bool


class ChannelProfileQuery:
    """Build the profile ``SELECT`` for ``username`` as seen by ``viewer_id``.

    ``subscribers_count`` counts edges whose channel is the target,
    ``channels_subscribed_to_count`` edges whose subscriber is the target, and
    ``is_subscribed`` is an ``EXISTS`` on ``(viewer -> target)``.
    """

    def __init__(self, username: str, viewer_id: int | None) -> None:
        self.username = username
        self.viewer_id = viewer_id

    def statement(self) -> Select:
        subscribers = (
            select(func.count(Subscription.id))
            .where(Subscription.channel_id == User.id)
            .correlate(User)
            .scalar_subquery()
        )
        subscribed_to = (
            select(func.count(Subscription.id))
            .where(Subscription.subscriber_id == User.id)
            .correlate(User)
            .scalar_subquery()
        )
        is_subscribed = exists(
            select(Subscription.id)
            .where(Subscription.channel_id == User.id)
            .where(Subscription.subscriber_id == self.viewer_id)
            .correlate(User)
        )
        return (
            select(
                User.id,
                User.username,
                User.email,
                User.full_name,
                User.avatar,
                User.cover_image,
                subscribers.label("subscribers_count"),
                subscribed_to.label("channels_subscribed_to_count"),
                is_subscribed.label("is_subscribed"),
            )
            .where(User.username == self.username)
            .limit(1)
        )


class ChannelRepository(SessionBound):
    """Read-only access to channel profiles."""

    def get_profile(self, username: str, viewer_id: int | None) -> ChannelProfileRow | None:
        """Return the aggregated profile, or ``None`` when no user matches."""
        row = self.session.execute(ChannelProfileQuery(username, viewer_id).statement()).first()
        if row is None:
            return None
        return ChannelProfileRow(
            id=row.id,
            username=row.username,
            email=row.email,
            full_name=row.full_name,
            avatar=row.avatar,
            cover_image=row.cover_image,
            subscribers_count=int(row.subscribers_count or 0),
            channels_subscribed_to_count=int(row.channels_subscribed_to_count or 0),
            is_subscribed=bool(row.is_subscribed),
        )
