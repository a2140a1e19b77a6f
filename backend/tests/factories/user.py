"""Factory Boy definition for :class:`taskmanager.models.user.User`."""

from __future__ import annotations

import factory
from taskmanager.models.user import ROLE_ADMIN, User

from tests.factories import BaseFactory

DEFAULT_PASSWORD = "Passw0rd!"


class UserFactory(BaseFactory):
    """Build persisted users; ``password`` goes through the hashing setter."""

    class Meta:
        model = User

    name = factory.Faker("first_name")
    email = factory.Sequence(lambda n: f"user{n}@example.com")
    password = DEFAULT_PASSWORD
    role = "user"
    is_active = True

    class Params:
        admin = factory.Trait(role=ROLE_ADMIN)
        inactive = factory.Trait(is_active=False)
