"""Unit tests for TrackedItemRepository."""

from datetime import datetime, timedelta

import pytest

from aniverse.repositories.tracked_item import TrackedItemRepository
from tests.factories.tracked_item import TrackedItemFactory
from tests.factories.user import UserFactory


class TestTrackedItemRepository:
    @pytest.fixture()
    def repo(self, app):
        return TrackedItemRepository()

    def test_upsert_inserts_with_defaults(self, repo, session):
        user = UserFactory()
        repo.upsert(user_id=user.id, external_id="5114", status="watching", display={})
        session.commit()

        [item] = repo.list_for_user(user.id)
        assert (item.external_id, item.status) == ("5114", "watching")
        assert (item.title, item.poster_url, item.episodes_total) == ("", "", 0)

    def test_upsert_updates_in_place(self, repo, session):
        user = UserFactory()
        repo.upsert(
            user_id=user.id,
            external_id="5114",
            status="planned",
            display={"title": "FMA:B", "episodes_total": 64},
        )
        repo.upsert(user_id=user.id, external_id="21", status="planned", display={})
        session.commit()
        first_id = repo.list_for_user(user.id)[0].id

        repo.upsert(user_id=user.id, external_id="5114", status="completed", display={})
        session.commit()

        items = repo.list_for_user(user.id)
        assert [i.external_id for i in items] == ["5114", "21"]
        assert items[0].id == first_id
        assert items[0].status == "completed"
        # display fields not supplied keep their stored values
        assert (items[0].title, items[0].episodes_total) == ("FMA:B", 64)

    def test_upsert_overwrites_supplied_display_fields(self, repo, session):
        item = TrackedItemFactory(external_id="1", title="Old", episodes_total=12)
        repo.upsert(
            user_id=item.user_id,
            external_id="1",
            status="dropped",
            display={"title": "New", "episodes_total": None},
        )
        session.commit()

        [row] = repo.list_for_user(item.user_id)
        assert (row.title, row.episodes_total, row.status) == ("New", 12, "dropped")

    def test_count_by_status(self, repo):
        user = UserFactory()
        TrackedItemFactory(user=user, status="watching")
        TrackedItemFactory(user=user, status="watching")
        TrackedItemFactory(user=user, status="dropped")
        TrackedItemFactory(status="completed")  # someone else

        assert repo.count_by_status(user.id) == {"watching": 2, "dropped": 1}

    def test_delete_for_user(self, repo, session):
        item = TrackedItemFactory(external_id="42")
        other = TrackedItemFactory(external_id="42")

        assert repo.delete_for_user(item.user_id, "42") == 1
        assert repo.delete_for_user(item.user_id, "42") == 0
        session.commit()
        assert len(repo.list_for_user(other.user_id)) == 1

    def test_recent_for_user_newest_first(self, repo, session):
        user = UserFactory()
        base = datetime(2024, 1, 1, 12, 0, 0)
        old = TrackedItemFactory(user=user, external_id="1")
        new = TrackedItemFactory(user=user, external_id="2")
        mid = TrackedItemFactory(user=user, external_id="3")
        old.updated_at = base
        new.updated_at = base + timedelta(hours=2)
        mid.updated_at = base + timedelta(hours=1)
        session.commit()

        assert [i.external_id for i in repo.recent_for_user(user.id, 2)] == ["2", "3"]
