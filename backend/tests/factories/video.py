"""Factory Boy definition for :class:`videotube.models.video.Video`."""

from __future__ import annotations

import factory

from tests.factories import BaseFactory
from tests.factories.user import UserFactory
from videotube.models.video import Video


class VideoFactory(BaseFactory):
    class Meta:
        model = Video

    id = None
    owner = factory.SubFactory(UserFactory)
    title = factory.Sequence(lambda n: f"Video {n}")
    description = factory.Faker("sentence")
    video_file = factory.Sequence(lambda n: f"https://media.test/videos/{n}.mp4")
    thumbnail = factory.Sequence(lambda n: f"https://media.test/thumbs/{n}.jpg")
    duration = 120.5
    views = 0
    is_published = True
