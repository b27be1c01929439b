"""
Contract tests shared by every RefreshTokenStore implementation.

The same scenarios run against the in-memory store, the SQL store (in-memory
SQLite through the app fixture) and the Redis store (``fakeredis``):

- replace keeps a single live token per user
- rotate is a compare-and-swap (OK / STALE / NOT_FOUND)
- delete and delete_for_user are idempotent
"""

from __future__ import annotations

import fakeredis
import pytest

from aniverse.infra.redis.redis_refresh_token_store import RedisRefreshTokenStore
from aniverse.infra.sqlalchemy.sql_refresh_token_store import SqlRefreshTokenStore
from aniverse.services._shared.ports import InMemoryRefreshTokenStore, RotationResult, token_fingerprint
from tests.factories import SQLAlchemySession
from tests.factories.user import UserFactory

TTL = 3600


@pytest.fixture
def fake_redis():
    """Provide a fresh FakeRedis instance for each test."""
    r = fakeredis.FakeRedis()
    r.flushall()
    return r


@pytest.fixture(params=["memory", "sql", "redis"])
def store(request):
    """Return each store implementation in turn."""
    if request.param == "memory":
        return InMemoryRefreshTokenStore()
    if request.param == "sql":
        # SQL rows reference users; make the factories use the app session
        SQLAlchemySession.set(request.getfixturevalue("session"))
        return SqlRefreshTokenStore()
    return RedisRefreshTokenStore(r=request.getfixturevalue("fake_redis"), ttl_seconds=TTL)


@pytest.fixture
def user_id(store) -> int:
    """A user id valid for the store (SQL rows need an existing user)."""
    if isinstance(store, SqlRefreshTokenStore):
        return UserFactory().id
    return 1


def test_replace_and_find(store, user_id):
    store.replace_for_user(user_id, "token-1")

    record = store.find("token-1")
    assert record is not None
    assert record.user_id == user_id
    assert record.token_hash == token_fingerprint("token-1")
    assert store.get_for_user(user_id) == record


def test_replace_revokes_previous_token(store, user_id):
    store.replace_for_user(user_id, "token-1")
    store.replace_for_user(user_id, "token-2")

    assert store.find("token-1") is None
    assert store.find("token-2").user_id == user_id


def test_rotate_ok_then_stale(store, user_id):
    store.replace_for_user(user_id, "old")

    assert store.rotate(user_id, "old", "new") is RotationResult.OK
    assert store.find("old") is None
    assert store.find("new").user_id == user_id
    # second use of the same old token loses the race
    assert store.rotate(user_id, "old", "newer") is RotationResult.STALE
    assert store.find("new").user_id == user_id


def test_rotate_without_record(store, user_id):
    assert store.rotate(user_id, "old", "new") is RotationResult.NOT_FOUND
    assert store.get_for_user(user_id) is None


def test_delete_is_idempotent(store, user_id):
    store.replace_for_user(user_id, "token-1")

    assert store.delete("token-1") is True
    assert store.delete("token-1") is False
    assert store.get_for_user(user_id) is None


def test_delete_of_superseded_token_keeps_live_one(store, user_id):
    store.replace_for_user(user_id, "token-1")
    store.replace_for_user(user_id, "token-2")

    assert store.delete("token-1") is False
    assert store.find("token-2") is not None


def test_delete_for_user(store, user_id):
    store.replace_for_user(user_id, "token-1")

    assert store.delete_for_user(user_id) is True
    assert store.delete_for_user(user_id) is False
    assert store.find("token-1") is None


def test_tokens_are_stored_as_digests(fake_redis):
    store = RedisRefreshTokenStore(r=fake_redis, ttl_seconds=TTL)
    store.replace_for_user(5, "raw-secret-token")

    keys = {k.decode() for k in fake_redis.keys("*")}
    assert keys == {"rt:u:5", f"rt:h:{token_fingerprint('raw-secret-token')}"}
    assert all("raw-secret-token" not in k for k in keys)
    assert 0 < fake_redis.ttl("rt:u:5") <= TTL
