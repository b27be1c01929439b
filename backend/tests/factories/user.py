"""Factory Boy definition for :class:`aniverse.models.user.User`."""

from __future__ import annotations

import factory

from aniverse.models.user import User
from tests.factories import BaseFactory, SQLAlchemySession

DEFAULT_PASSWORD = "pass123"


class UserFactory(BaseFactory):
    """
    Build persisted :class:`aniverse.models.user.User` instances.

    Notes
    -----
    - The password is hashed through the model setter; pass ``password=...``
      to choose it, otherwise :data:`DEFAULT_PASSWORD` is used.
    """

    class Meta:
        model = User

    id = None  # let autoincrement handle it
    email = factory.Sequence(lambda n: f"user{n}@example.com")
    nickname = factory.Sequence(lambda n: f"otaku{n}")
    password_hash = factory.LazyFunction(lambda: "")  # set via postgen
    social_links = factory.LazyFunction(dict)

    @factory.post_generation
    def password(obj, create, extracted, **kwargs):
        """Set password using model setter (ensures hashing)."""
        obj.password = extracted or DEFAULT_PASSWORD
        if create:
            SQLAlchemySession.get().commit()
