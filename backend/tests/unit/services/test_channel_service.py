"""Tests for ChannelService profile aggregation."""

from __future__ import annotations

import pytest

from tests.factories.subscription import SubscriptionFactory
from tests.factories.user import UserFactory
from videotube.services import ChannelProfileIn, ChannelService
from videotube.services._shared.errors import NotFoundError, ValidationError


@pytest.fixture()
def service() -> ChannelService:
    return ChannelService()


def test_profile_counts_and_flag(service, session):
    channel = UserFactory(username="dev", cover_image="https://media.test/covers/dev.jpg")
    viewer = UserFactory()
    SubscriptionFactory(subscriber=viewer, channel=channel)
    SubscriptionFactory(channel=channel)
    SubscriptionFactory(channel=channel)
    SubscriptionFactory(subscriber=channel)

    out = service.get_profile(ChannelProfileIn(username="  DEV ", viewer_id=viewer.id))

    assert out.id == channel.id
    assert out.username == "dev"
    assert out.cover_image == "https://media.test/covers/dev.jpg"
    assert out.subscribers_count == 3
    assert out.channels_subscribed_to_count == 1
    assert out.is_subscribed is True


def test_profile_of_self_is_not_subscribed(service):
    channel = UserFactory(username="dev")
    SubscriptionFactory(channel=channel)

    out = service.get_profile(ChannelProfileIn(username="dev", viewer_id=channel.id))
    assert out.is_subscribed is False
    assert out.subscribers_count == 1


def test_profile_has_no_secrets(service):
    UserFactory(username="dev")
    out = service.get_profile(ChannelProfileIn(username="dev", viewer_id=None))
    assert not hasattr(out, "password_hash")
    assert not hasattr(out, "refresh_token")


def test_blank_username(service):
    with pytest.raises(ValidationError, match="Username is missing"):
        service.get_profile(ChannelProfileIn(username="   ", viewer_id=None))


def test_unknown_channel(service):
    with pytest.raises(NotFoundError, match="Channel does not exist"):
        service.get_profile(ChannelProfileIn(username="ghost", viewer_id=None))
