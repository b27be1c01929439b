"""Tracked items: one row per (user, external catalog id)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Enum, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from aniverse.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin

if TYPE_CHECKING:
    from .user import User

# --- Domain Enums ---
# ``on_hold`` existed once and was dropped; it is intentionally absent.
TRACKED_STATUSES = ("watching", "completed", "dropped", "planned")

TrackedStatus = Enum(*TRACKED_STATUSES, name="tracked_status")

EXTERNAL_ID_MAX_LENGTH = 64
TITLE_MAX_LENGTH = 255
POSTER_URL_MAX_LENGTH = 500


class TrackedItem(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """A user's watch status for one title of the external catalog.

    The surrogate ``id`` doubles as the list position: rows are listed by
    ascending ``id``, and an in-place upsert never changes it.
    """

    __tablename__ = "tracked_items"

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    external_id: Mapped[str] = mapped_column(String(EXTERNAL_ID_MAX_LENGTH), nullable=False)
    status: Mapped[str] = mapped_column(TrackedStatus, nullable=False)

    # Display cache supplied by the client
    title: Mapped[str] = mapped_column(String(TITLE_MAX_LENGTH), nullable=False, default="")
    poster_url: Mapped[str] = mapped_column(String(POSTER_URL_MAX_LENGTH), nullable=False, default="")
    episodes_total: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        UniqueConstraint("user_id", "external_id", name="uq_tracked_items_user_external"),
        CheckConstraint("length(external_id) > 0", name="ck_tracked_items_external_id_not_empty"),
        CheckConstraint("episodes_total >= 0", name="ck_tracked_items_episodes_non_negative"),
        Index("ix_tracked_items_user_updated", "user_id", "updated_at"),
    )

    user: Mapped[User] = relationship("User", back_populates="tracked_items")
