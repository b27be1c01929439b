"""Unit tests for ProfileService (profiles and friendships)."""

from __future__ import annotations

import pytest

from aniverse.services._shared.errors import NotFoundError, ValidationError
from aniverse.services.profiles import ProfileService, ProfileUpdateIn
from tests.factories.user import UserFactory


@pytest.fixture()
def service(app) -> ProfileService:
    return ProfileService()


def test_get_profile_never_exposes_password(service):
    user = UserFactory(nickname="spike")
    profile = service.get_profile(user.id)

    assert profile.user.nickname == "spike"
    assert not hasattr(profile.user, "password_hash")
    assert profile.friends == [] and profile.is_friend is False


def test_get_profile_unknown_user(service):
    with pytest.raises(NotFoundError):
        service.get_profile(404)


def test_update_profile_partial(service):
    user = UserFactory(nickname="spike")
    profile = service.update_profile(
        user.id, ProfileUpdateIn(fields={"bio": "bounty hunter", "social_links": {"telegram": "@spike"}})
    )

    assert profile.user.nickname == "spike"
    assert profile.user.bio == "bounty hunter"
    assert profile.user.social_links == {"telegram": "@spike"}


@pytest.mark.parametrize(
    "fields", [{"email": "x@example.com"}, {"nickname": "n" * 51}, {"social_links": "nope"}]
)
def test_update_profile_rejects_bad_fields(service, fields):
    user = UserFactory()
    with pytest.raises(ValidationError):
        service.update_profile(user.id, ProfileUpdateIn(fields=fields))


def test_friend_request_then_accept(service):
    a, b = UserFactory(), UserFactory()
    service.request_friend(a.id, b.id)

    incoming = service.get_profile(b.id, viewer_id=b.id).incoming_requests
    assert [f.id for f in incoming] == [a.id]
    # pending requests are private to the owner
    assert service.get_profile(b.id, viewer_id=a.id).incoming_requests == []

    profile = service.accept_friend(b.id, a.id)
    assert [f.id for f in profile.friends] == [a.id]
    assert profile.incoming_requests == []
    assert service.get_profile(b.id, viewer_id=a.id).is_friend is True
    assert [f.id for f in service.get_profile(a.id).friends] == [b.id]


def test_repeated_request_is_noop(service):
    a, b = UserFactory(), UserFactory()
    service.request_friend(a.id, b.id)
    service.request_friend(a.id, b.id)
    assert len(service.get_profile(b.id, viewer_id=b.id).incoming_requests) == 1


def test_mutual_requests_form_friendship(service):
    a, b = UserFactory(), UserFactory()
    service.request_friend(a.id, b.id)
    service.request_friend(b.id, a.id)

    profile = service.get_profile(a.id, viewer_id=a.id)
    assert [f.id for f in profile.friends] == [b.id]
    assert profile.incoming_requests == []


def test_cannot_befriend_yourself(service):
    a = UserFactory()
    with pytest.raises(ValidationError):
        service.request_friend(a.id, a.id)


def test_request_to_unknown_user(service):
    a = UserFactory()
    with pytest.raises(NotFoundError):
        service.request_friend(a.id, 999)


def test_accept_without_request(service):
    a, b = UserFactory(), UserFactory()
    with pytest.raises(NotFoundError):
        service.accept_friend(b.id, a.id)


def test_remove_friend_is_symmetric_and_idempotent(service):
    a, b = UserFactory(), UserFactory()
    service.request_friend(a.id, b.id)
    service.accept_friend(b.id, a.id)

    assert service.remove_friend(a.id, b.id).friends == []
    assert service.remove_friend(a.id, b.id).friends == []
    assert service.get_profile(b.id).friends == []
