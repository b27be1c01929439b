"""API v1 blueprint package bundling versioned routes."""

from __future__ import annotations

from flask import Blueprint

API_VERSION = "v1"

# Import blueprints *only here* to keep imports localized and avoid cycles.
from .auth import bp as auth_bp  # noqa: E402
from .catalog import bp as catalog_bp  # noqa: E402
from .health import bp as health_bp  # noqa: E402
from .tracking import bp as tracking_bp  # noqa: E402
from .users import bp as users_bp  # noqa: E402

# Each tuple: (blueprint, url_prefix_relative_to_version)
REGISTRY: list[tuple[Blueprint, str]] = [
    (health_bp, ""),  # -> /api/v1/health
    (auth_bp, ""),  # -> /api/v1/register, /login, /logout, /refresh
    (tracking_bp, "/list"),
    (users_bp, "/users"),
    (catalog_bp, ""),  # -> /api/v1/anime..., /api/v1/player/...
]
