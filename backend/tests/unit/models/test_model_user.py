"""Tests for the User and TrackedItem models."""

from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError

from aniverse.models import TrackedItem, User
from tests.factories.user import UserFactory


class TestUser:
    def test_password_hashing(self, session):
        u = User(email="Test@Example.com")
        u.password = "secret123"
        session.add(u)
        session.commit()
        assert u.password_hash != "secret123"
        assert u.verify_password("secret123") is True
        assert u.verify_password("wrong") is False

    def test_password_is_write_only(self):
        u = User(email="a@example.com")
        u.password = "x"
        with pytest.raises(AttributeError):
            _ = u.password

    def test_empty_password_rejected(self):
        u = User(email="a@example.com")
        with pytest.raises(ValueError):
            u.password = ""

    def test_email_normalized_and_unique(self, session):
        u1 = User(email="  Alice@Example.com ")
        u1.password = "pw"
        session.add(u1)
        session.commit()
        assert u1.email == "alice@example.com"

        u2 = User(email="alice@example.com")
        u2.password = "pw"
        session.add(u2)
        with pytest.raises(IntegrityError):
            session.commit()
        session.rollback()

    def test_malformed_email_rejected(self):
        with pytest.raises(ValueError):
            User(email="not-an-email")

    def test_social_links_filtered_to_known_keys(self, app):
        u = User(email="c@example.com", social_links={"telegram": " @c ", "myspace": "x", "vk": ""})
        assert u.social_links == {"telegram": "@c"}


class TestTrackedItem:
    def test_external_id_unique_per_user(self, session):
        user = UserFactory()
        session.add(TrackedItem(user_id=user.id, external_id="5114", status="watching"))
        session.commit()

        session.add(TrackedItem(user_id=user.id, external_id="5114", status="planned"))
        with pytest.raises(IntegrityError):
            session.commit()
        session.rollback()

    def test_same_external_id_allowed_for_different_users(self, session):
        a, b = UserFactory(), UserFactory()
        session.add_all(
            [
                TrackedItem(user_id=a.id, external_id="21", status="watching"),
                TrackedItem(user_id=b.id, external_id="21", status="dropped"),
            ]
        )
        session.commit()
        assert session.query(TrackedItem).count() == 2
