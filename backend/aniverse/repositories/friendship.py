"""Repositories for the friendship graph."""

from __future__ import annotations

from sqlalchemy import delete, or_, select

from aniverse.models.friendship import FriendRequest, Friendship
from aniverse.repositories.base import BaseRepository


class FriendshipRepository(BaseRepository[Friendship]):
    """Symmetric friendships. Writes always touch both directions."""

    model = Friendship

    def friend_ids(self, user_id: int) -> list[int]:
        stmt = (
            select(Friendship.friend_id)
            .where(Friendship.user_id == user_id)
            .order_by(Friendship.id.asc())
        )
        return [int(fid) for fid in self.session.execute(stmt).scalars().all()]

    def are_friends(self, user_id: int, other_id: int) -> bool:
        return self.exists(user_id=user_id, friend_id=other_id)

    def link(self, user_id: int, other_id: int) -> None:
        """Create both rows unless they already exist."""
        for a, b in ((user_id, other_id), (other_id, user_id)):
            if not self.exists(user_id=a, friend_id=b):
                self.session.add(Friendship(user_id=a, friend_id=b))
        self.flush()

    def unlink(self, user_id: int, other_id: int) -> int:
        """Delete both rows. Returns how many were removed."""
        stmt = delete(Friendship).where(
            or_(
                (Friendship.user_id == user_id) & (Friendship.friend_id == other_id),
                (Friendship.user_id == other_id) & (Friendship.friend_id == user_id),
            )
        )
        return int(self.session.execute(stmt).rowcount or 0)


class FriendRequestRepository(BaseRepository[FriendRequest]):
    """Pending friend requests."""

    model = FriendRequest

    def is_pending(self, from_user_id: int, to_user_id: int) -> bool:
        return self.exists(from_user_id=from_user_id, to_user_id=to_user_id)

    def incoming_ids(self, user_id: int) -> list[int]:
        stmt = (
            select(FriendRequest.from_user_id)
            .where(FriendRequest.to_user_id == user_id)
            .order_by(FriendRequest.id.asc())
        )
        return [int(uid) for uid in self.session.execute(stmt).scalars().all()]

    def clear_between(self, user_id: int, other_id: int) -> int:
        """Drop requests in either direction between the two users."""
        stmt = delete(FriendRequest).where(
            or_(
                (FriendRequest.from_user_id == user_id) & (FriendRequest.to_user_id == other_id),
                (FriendRequest.from_user_id == other_id) & (FriendRequest.to_user_id == user_id),
            )
        )
        return int(self.session.execute(stmt).rowcount or 0)
