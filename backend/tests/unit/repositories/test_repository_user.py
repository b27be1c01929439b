"""Unit tests for UserRepository."""

import pytest

from aniverse.repositories.user import UserRepository
from tests.factories.user import UserFactory


class TestUserRepository:
    """Ensure ``UserRepository`` performs core persistence operations."""

    @pytest.fixture()
    def repo(self, app):
        return UserRepository()

    def test_get_by_email_is_case_insensitive(self, repo):
        u = UserFactory(email="alice@example.com")
        fetched = repo.get_by_email("  ALICE@example.com ")
        assert fetched is not None
        assert fetched.id == u.id

    def test_exists_by_email_and_id(self, repo):
        u = UserFactory(email="bob@example.com")
        assert repo.exists_by_email("bob@example.com")
        assert not repo.exists_by_email("nonexistent@example.com")
        assert repo.exists_by_id(u.id)
        assert not repo.exists_by_id(u.id + 100)

    def test_authenticate(self, repo):
        UserFactory(email="c@example.com", password="pass123")
        assert repo.authenticate("c@example.com", "pass123") is not None
        assert repo.authenticate("c@example.com", "wrong") is None
        assert repo.authenticate("missing@example.com", "pass123") is None

    def test_get_many_orders_by_id(self, repo):
        a, b, c = UserFactory(), UserFactory(), UserFactory()
        assert [u.id for u in repo.get_many([c.id, a.id])] == [a.id, c.id]
        assert repo.get_many([]) == []
        assert b.id not in [u.id for u in repo.get_many([a.id])]

    def test_assign_updates_rejects_credentials(self, repo):
        u = UserFactory()
        with pytest.raises(ValueError):
            repo.assign_updates(u, {"email": "evil@example.com"})
        with pytest.raises(ValueError):
            repo.assign_updates(u, {"password_hash": "x"})

    def test_assign_updates_profile_fields(self, repo, session):
        u = UserFactory()
        repo.assign_updates(u, {"nickname": "Spike", "badge": "cowboy"})
        session.commit()
        assert repo.get(u.id).nickname == "Spike"
