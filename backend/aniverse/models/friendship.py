"""Social graph: symmetric friendships and pending friend requests."""

from __future__ import annotations

from sqlalchemy import CheckConstraint, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from aniverse.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin


class Friendship(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """One direction of a friendship; accepted friendships always have both rows."""

    __tablename__ = "friendships"

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    friend_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    __table_args__ = (
        UniqueConstraint("user_id", "friend_id", name="uq_friendships_pair"),
        CheckConstraint("user_id <> friend_id", name="ck_friendships_not_self"),
    )


class FriendRequest(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """Pending request from ``from_user_id`` to ``to_user_id``."""

    __tablename__ = "friend_requests"

    from_user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    to_user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    __table_args__ = (
        UniqueConstraint("from_user_id", "to_user_id", name="uq_friend_requests_pair"),
        CheckConstraint("from_user_id <> to_user_id", name="ck_friend_requests_not_self"),
    )
