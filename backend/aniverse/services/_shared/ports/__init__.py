"""
aniverse.services._shared.ports
===============================

*Ports* (hexagonal interfaces) decoupling services from infrastructure.

Modules
-------
- :mod:`refresh_token_store`:
    :class:`~.RefreshTokenStore` (single live refresh token per user),
    :class:`~.RotationResult`, :class:`~.RefreshRecord` and an in-memory
    implementation.
- :mod:`catalog`:
    :class:`~.CatalogProvider` and :class:`~.PlayerProvider` for the upstream
    metadata and player APIs.

Concrete adapters (SQL, Redis, HTTP) live under ``aniverse.infra``.
"""

from __future__ import annotations

from .catalog import CatalogProvider, PlayerLink, PlayerProvider, StubCatalogProvider
from .refresh_token_store import (
    InMemoryRefreshTokenStore,
    RefreshRecord,
    RefreshTokenStore,
    RotationResult,
    token_fingerprint,
)

__all__ = [
    "CatalogProvider",
    "InMemoryRefreshTokenStore",
    "PlayerLink",
    "PlayerProvider",
    "RefreshRecord",
    "RefreshTokenStore",
    "RotationResult",
    "StubCatalogProvider",
    "token_fingerprint",
]
