"""Factory Boy definition for :class:`aniverse.models.tracked_item.TrackedItem`."""

from __future__ import annotations

import factory

from aniverse.models.tracked_item import TrackedItem
from tests.factories import BaseFactory
from tests.factories.user import UserFactory


class TrackedItemFactory(BaseFactory):
    class Meta:
        model = TrackedItem

    id = None
    user = factory.SubFactory(UserFactory)
    external_id = factory.Sequence(lambda n: str(1000 + n))
    status = "planned"
    title = factory.Faker("sentence", nb_words=3)
    poster_url = factory.LazyAttribute(lambda o: f"https://cdn.example.com/{o.external_id}.jpg")
    episodes_total = 12
