"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import AuthResponseSchema, LoginSchema, RegisterSchema
from .catalog import AnimeQuerySchema, PlayerLinkSchema
from .profile import (
    FriendBriefSchema,
    ProfileSchema,
    ProfileUpdateSchema,
    RecentQuerySchema,
    UserPublicSchema,
)
from .tracking import StatsSchema, TrackedItemInSchema, TrackedItemSchema

__all__ = [
    "AnimeQuerySchema",
    "AuthResponseSchema",
    "FriendBriefSchema",
    "LoginSchema",
    "PlayerLinkSchema",
    "ProfileSchema",
    "ProfileUpdateSchema",
    "RecentQuerySchema",
    "RegisterSchema",
    "StatsSchema",
    "TrackedItemInSchema",
    "TrackedItemSchema",
    "UserPublicSchema",
]
