"""
DTOs for the profile and friendship services.

Output DTOs never carry the password hash; services build them from ORM rows
through :func:`to_user_public`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from aniverse.models.user import User

# --------------------------------------------------------------------------- #
# Input DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class ProfileUpdateIn:
    """
    Partial profile update. Only keys present in ``fields`` are written.

    :param fields: Mapping restricted to nickname, bio, avatar_path,
        cover_path, social_links and badge.
    :type fields: dict[str, Any]
    """

    fields: dict[str, Any] = field(default_factory=dict)


# --------------------------------------------------------------------------- #
# Output DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class UserPublicOut:
    """
    Public-safe view of a user.

    :param id: User identifier.
    :type id: int
    :param email: Login email.
    :type email: str
    """

    id: int
    email: str
    nickname: str | None = None
    bio: str | None = None
    avatar_path: str | None = None
    cover_path: str | None = None
    social_links: dict[str, str] = field(default_factory=dict)
    badge: str | None = None


@dataclass(frozen=True, slots=True)
class FriendBriefOut:
    """Minimal friend card shown on a profile."""

    id: int
    nickname: str | None
    avatar_path: str | None


@dataclass(frozen=True, slots=True)
class ProfileOut:
    """
    Profile page payload.

    :param user: Public view of the profile owner.
    :param friends: Friends of the owner, in befriending order.
    :param is_friend: Whether the viewer is a friend of the owner
        (always ``False`` for anonymous viewers and for the owner).
    :param incoming_requests: Pending requests, only filled for the owner.
    """

    user: UserPublicOut
    friends: list[FriendBriefOut] = field(default_factory=list)
    is_friend: bool = False
    incoming_requests: list[FriendBriefOut] = field(default_factory=list)


def to_user_public(user: User) -> UserPublicOut:
    """Build a :class:`UserPublicOut` from an ORM ``User``."""
    return UserPublicOut(
        id=int(user.id),
        email=user.email,
        nickname=user.nickname,
        bio=user.bio,
        avatar_path=user.avatar_path,
        cover_path=user.cover_path,
        social_links=dict(user.social_links or {}),
        badge=user.badge,
    )


def to_friend_brief(user: User) -> FriendBriefOut:
    return FriendBriefOut(id=int(user.id), nickname=user.nickname, avatar_path=user.avatar_path)
