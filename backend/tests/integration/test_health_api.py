"""Health endpoint tests."""

from __future__ import annotations

import fakeredis
import redis

from aniverse.core.config import TestingConfig
from aniverse.core.extensions import db
from aniverse.factory import create_app
from tests.helpers.utils import API, register


def test_health_reports_db_and_store(client) -> None:
    resp = client.get(f"{API}/health")
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["status"] == "ok"
    assert body["db"] == "ok"
    assert body["refresh_store"] == "SqlRefreshTokenStore"


def test_unknown_route_is_problem_json(client) -> None:
    resp = client.get(f"{API}/nope")
    assert resp.status_code == 404
    assert resp.mimetype == "application/problem+json"


class _RedisConfig(TestingConfig):
    REDIS_URL = "redis://cache.test:6379/0"


def test_redis_url_selects_redis_store(monkeypatch) -> None:
    fake = fakeredis.FakeRedis()
    monkeypatch.setattr(redis.Redis, "from_url", classmethod(lambda cls, url, **kw: fake))

    app = create_app(_RedisConfig)
    with app.app_context():
        db.create_all()
        client = app.test_client()
        assert client.get(f"{API}/health").get_json()["refresh_store"] == "RedisRefreshTokenStore"

        register(client)
        assert client.get(f"{API}/refresh").status_code == 200
        assert fake.keys("rt:u:*")
        db.drop_all()
