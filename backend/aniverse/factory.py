"""Application factory wiring Flask extensions and blueprints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from flask import Flask

from aniverse.core.config import BaseConfig, get_config
from aniverse.core.logger import configure_logging, init_app as init_logging

if TYPE_CHECKING:
    from aniverse.services._shared.ports.refresh_token_store import RefreshTokenStore


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    refresh_store: RefreshTokenStore | None = None,
    instance_relative_config: bool = True,
    instance_config_filename: str = "config.py",
) -> Flask:
    """Build and configure the Flask application.

    :param config: Config class/object (defaults to the one selected by ``APP_ENV``).
    :param refresh_store: Override of the refresh-token store (tests, tooling).
    :raises RuntimeError: When the token signing secrets are missing or equal,
        or when ``REDIS_URL`` is set but unreachable.
    """

    app = Flask(__name__, instance_relative_config=instance_relative_config)

    app.config.from_object(get_config() if config is None else config)
    if instance_relative_config and instance_config_filename:
        app.config.from_pyfile(instance_config_filename, silent=True)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    # Proxy headers if running behind a reverse proxy (optional module)
    from aniverse.core import proxy

    proxy.init_app(app)

    from aniverse.core import extensions

    extensions.init_app(app)

    # Fails fast on missing or shared signing secrets
    from aniverse.core import security

    security.init_app(app, store=refresh_store)

    init_logging(app)

    from aniverse.core import cors

    cors.init_app(app)

    from aniverse.api import init_app as init_api

    init_api(app)

    from aniverse.core import errors

    errors.init_app(app)

    from aniverse import cli as app_cli

    app_cli.init_app(app)

    return app
