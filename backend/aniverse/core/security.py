"""Token service wiring: build the signing config once and pick the refresh store."""

from __future__ import annotations

import logging

from flask import Flask, current_app

from aniverse.services._shared.ports.refresh_token_store import RefreshTokenStore
from aniverse.services.tokens import TokenConfig, TokenService

log = logging.getLogger(__name__)

EXTENSION_KEY = "token_service"


def build_refresh_store(app: Flask, config: TokenConfig) -> RefreshTokenStore:
    """Return the Redis store when Redis is configured, else the SQL one."""
    redis_client = app.extensions.get("redis_client")
    if redis_client is not None:
        from aniverse.infra.redis.redis_refresh_token_store import RedisRefreshTokenStore

        return RedisRefreshTokenStore(
            r=redis_client, ttl_seconds=int(config.refresh_ttl.total_seconds())
        )

    from aniverse.infra.sqlalchemy.sql_refresh_token_store import SqlRefreshTokenStore

    return SqlRefreshTokenStore()


def init_app(app: Flask, *, store: RefreshTokenStore | None = None) -> TokenService:
    """
    Create the application's :class:`TokenService`.

    Must run after :func:`aniverse.core.extensions.init_app` so the Redis
    client (if any) is available.

    :param store: Explicit refresh store, mainly for tests.
    :raises RuntimeError: When the signing secrets are missing, empty or equal.
    """
    config = TokenConfig.from_mapping(app.config)
    refresh_store = store or build_refresh_store(app, config)
    service = TokenService(config, refresh_store)
    app.extensions[EXTENSION_KEY] = service
    log.debug("token service ready (store=%s)", type(refresh_store).__name__)
    return service


def get_token_service() -> TokenService:
    """Return the token service of the current application."""
    service = current_app.extensions.get(EXTENSION_KEY)
    if service is None:
        raise RuntimeError("Token service is not initialized. Call security.init_app() first.")
    return service
