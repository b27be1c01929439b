"""Service layer public API.

This package exposes the application services so that callers can import from
:mod:`aniverse.services` without knowing the internal structure.

Re-exports
----------
- Base primitives (from ``aniverse.services._shared.base``)
    * :class:`BaseService`
    * :class:`ServiceContext`

- Token service (from ``aniverse.services.tokens``)
    * :class:`TokenService`, :class:`TokenConfig`, :class:`Identity`, :class:`TokenPair`

- Session workflow (from ``aniverse.services.auth``)
    * :class:`SessionService`
    * DTOs: :class:`RegisterIn`, :class:`LoginIn`, :class:`LogoutIn`,
      :class:`RefreshIn`, :class:`AuthResult`

- Tracked-item list (from ``aniverse.services.tracking``)
    * :class:`TrackedItemService`
    * DTOs: :class:`TrackedItemUpsertIn`, :class:`TrackedItemOut`, :class:`StatsOut`

- Profiles and friends (from ``aniverse.services.profiles``)
    * :class:`ProfileService`
    * DTOs: :class:`ProfileUpdateIn`, :class:`ProfileOut`, :class:`UserPublicOut`

- Catalog proxy (from ``aniverse.services.catalog``)
    * :class:`CatalogService`
"""

from __future__ import annotations

from ._shared.base import BaseService, ServiceContext
from .auth import AuthResult, LoginIn, LogoutIn, RefreshIn, RegisterIn, SessionService
from .catalog import CatalogService
from .profiles import ProfileOut, ProfileService, ProfileUpdateIn, UserPublicOut
from .tokens import Identity, TokenConfig, TokenPair, TokenService
from .tracking import StatsOut, TrackedItemOut, TrackedItemService, TrackedItemUpsertIn

__all__ = [
    "AuthResult",
    "BaseService",
    "CatalogService",
    "Identity",
    "LoginIn",
    "LogoutIn",
    "ProfileOut",
    "ProfileService",
    "ProfileUpdateIn",
    "RefreshIn",
    "RegisterIn",
    "ServiceContext",
    "SessionService",
    "StatsOut",
    "TokenConfig",
    "TokenPair",
    "TokenService",
    "TrackedItemOut",
    "TrackedItemService",
    "TrackedItemUpsertIn",
    "UserPublicOut",
]
