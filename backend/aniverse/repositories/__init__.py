"""Repository package exposing persistence-layer access for all domain models."""

from __future__ import annotations

from aniverse.repositories.base import BaseRepository, parse_sort_tokens
from aniverse.repositories.friendship import FriendRequestRepository, FriendshipRepository
from aniverse.repositories.refresh_token import RefreshTokenRepository
from aniverse.repositories.tracked_item import DISPLAY_FIELDS, TrackedItemRepository
from aniverse.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "DISPLAY_FIELDS",
    "FriendRequestRepository",
    "FriendshipRepository",
    "RefreshTokenRepository",
    "TrackedItemRepository",
    "UserRepository",
    "parse_sort_tokens",
]
