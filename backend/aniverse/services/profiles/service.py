"""
ProfileService
==============

Public profiles, owner profile edits and the symmetric friendship graph.
"""

from __future__ import annotations

import logging

from aniverse.models.user import User
from aniverse.services._shared.base import BaseService
from aniverse.services._shared.errors import NotFoundError, ValidationError
from aniverse.services.profiles.dto import (
    ProfileOut,
    ProfileUpdateIn,
    to_friend_brief,
    to_user_public,
)

log = logging.getLogger(__name__)

#: Maximum lengths for free-text profile fields (mirrors the column sizes).
_TEXT_LIMITS = {"nickname": 50, "avatar_path": 255, "cover_path": 255, "badge": 32}


class ProfileService(BaseService):
    """
    Application service for profiles and friends.

    Responsibilities
    ----------------
    - Read public profiles, personalised for an optional viewer.
    - Apply owner-only profile updates through the repository whitelist.
    - Keep both directions of a friendship in step.
    """

    # --------------------------------------------------------------------- #
    # Reads
    # --------------------------------------------------------------------- #

    def get_profile(self, user_id: int, viewer_id: int | None = None) -> ProfileOut:
        """
        Return the profile of ``user_id`` as seen by ``viewer_id``.

        Pending incoming requests are only included when the viewer is the owner.

        :raises NotFoundError: Unknown user.
        """
        with self.ro_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            return self._build_profile(uow, user, viewer_id)

    @staticmethod
    def _build_profile(uow, user: User, viewer_id: int | None) -> ProfileOut:
        friends = uow.users.get_many(uow.friendships.friend_ids(user.id))
        is_owner = viewer_id is not None and viewer_id == user.id
        is_friend = (
            viewer_id is not None and not is_owner and uow.friendships.are_friends(user.id, viewer_id)
        )
        incoming = uow.users.get_many(uow.friend_requests.incoming_ids(user.id)) if is_owner else []
        return ProfileOut(
            user=to_user_public(user),
            friends=[to_friend_brief(f) for f in friends],
            is_friend=is_friend,
            incoming_requests=[to_friend_brief(u) for u in incoming],
        )

    # --------------------------------------------------------------------- #
    # Writes
    # --------------------------------------------------------------------- #

    def update_profile(self, user_id: int, dto: ProfileUpdateIn) -> ProfileOut:
        """
        Apply a partial update to the owner's profile.

        :raises ValidationError: Unknown field or value too long.
        :raises NotFoundError: Unknown user.
        """
        fields = dict(dto.fields)
        for key, limit in _TEXT_LIMITS.items():
            value = fields.get(key)
            if value is not None and (not isinstance(value, str) or len(value) > limit):
                raise ValidationError(key, f"Must be a string of at most {limit} characters.")
        links = fields.get("social_links")
        if links is not None and not isinstance(links, dict):
            raise ValidationError("social_links", "Must be an object.")

        with self.rw_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            try:
                uow.users.assign_updates(user, fields)
            except ValueError as exc:
                raise ValidationError("profile", str(exc)) from exc
            profile = self._build_profile(uow, user, user_id)

        log.info("profile updated", extra={"event": "profile.update", "user_id": user_id})
        return profile

    def request_friend(self, from_user_id: int, to_user_id: int) -> None:
        """
        Send a friend request.

        No-op when the users are already friends or the request is pending.
        When ``to_user_id`` already asked ``from_user_id``, the friendship is
        formed right away.

        :raises ValidationError: Self-request.
        :raises NotFoundError: Unknown target user.
        """
        if from_user_id == to_user_id:
            raise ValidationError("userId", "You cannot befriend yourself.")

        with self.rw_uow() as uow:
            self.ensure_user_exists(uow, to_user_id)
            if uow.friendships.are_friends(from_user_id, to_user_id):
                return
            if uow.friend_requests.is_pending(to_user_id, from_user_id):
                uow.friendships.link(from_user_id, to_user_id)
                uow.friend_requests.clear_between(from_user_id, to_user_id)
                return
            if uow.friend_requests.is_pending(from_user_id, to_user_id):
                return
            uow.friend_requests.add(
                uow.friend_requests.model(from_user_id=from_user_id, to_user_id=to_user_id)
            )

    def accept_friend(self, user_id: int, from_user_id: int) -> ProfileOut:
        """
        Accept the pending request of ``from_user_id``.

        :raises NotFoundError: No pending request from that user.
        """
        with self.rw_uow() as uow:
            if not uow.friend_requests.is_pending(from_user_id, user_id):
                raise NotFoundError("FriendRequest", from_user_id)
            uow.friendships.link(user_id, from_user_id)
            uow.friend_requests.clear_between(user_id, from_user_id)
            profile = self._build_profile(uow, uow.users.get(user_id), user_id)

        log.info("friend request accepted", extra={"event": "friends.accept", "user_id": user_id})
        return profile

    def remove_friend(self, user_id: int, friend_id: int) -> ProfileOut:
        """Remove a friendship in both directions. Idempotent."""
        with self.rw_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            uow.friendships.unlink(user_id, friend_id)
            profile = self._build_profile(uow, user, user_id)
        return profile
