"""Factory Boy definition for :class:`videotube.models.user.User`."""

from __future__ import annotations

import factory

from tests.factories import BaseFactory
from videotube.models.user import User

DEFAULT_PASSWORD = "Passw0rd!"


class UserFactory(BaseFactory):
    """Build persisted :class:`User` instances with a hashed default password."""

    class Meta:
        model = User

    id = None  # let autoincrement handle it
    username = factory.Sequence(lambda n: f"user{n}")
    email = factory.Sequence(lambda n: f"user{n}@example.com")
    full_name = factory.Faker("name")
    avatar = factory.LazyAttribute(lambda o: f"https://media.test/avatars/{o.username}.png")
    cover_image = None
    password = DEFAULT_PASSWORD
