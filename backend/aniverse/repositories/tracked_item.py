"""Tracked-item repository with an atomic upsert-by-key."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sqlalchemy import delete, func, select

from aniverse.models.tracked_item import TrackedItem
from aniverse.repositories.base import BaseRepository

#: Display columns a client may refresh on every write.
DISPLAY_FIELDS = ("title", "poster_url", "episodes_total")


class TrackedItemRepository(BaseRepository[TrackedItem]):
    """Persistence-only repository for :class:`TrackedItem`.

    Rows are addressed by the natural key ``(user_id, external_id)``; the
    caller is responsible for passing an already-canonical ``external_id``.
    """

    model = TrackedItem

    def _sortable_fields(self):
        return {"updated_at": TrackedItem.updated_at, "created_at": TrackedItem.created_at}

    def _filterable_fields(self):
        return {"user_id": TrackedItem.user_id, "status": TrackedItem.status}

    # ---------------------------- Reads ----------------------------

    def list_for_user(self, user_id: int) -> list[TrackedItem]:
        """Return the user's items in list order (insertion order)."""
        return self.list(filters={"user_id": user_id})

    def recent_for_user(self, user_id: int, limit: int) -> list[TrackedItem]:
        """Return the user's most recently updated items, newest first."""
        return self.list(
            filters={"user_id": user_id}, sort=["-updated_at"], limit=limit, pk_desc=True
        )

    def count_by_status(self, user_id: int) -> dict[str, int]:
        """Aggregate row counts per status for ``user_id``."""
        stmt = (
            select(TrackedItem.status, func.count())
            .where(TrackedItem.user_id == user_id)
            .group_by(TrackedItem.status)
        )
        return {status: int(count) for status, count in self.session.execute(stmt).all()}

    # ---------------------------- Writes ----------------------------

    def upsert(
        self,
        *,
        user_id: int,
        external_id: str,
        status: str,
        display: Mapping[str, Any],
    ) -> None:
        """Insert the item or update it in place, in a single statement when possible.

        On insert, missing display fields take their defaults (empty title and
        poster, zero episodes). On update, only the display fields present in
        ``display`` are overwritten. The row id, and with it the list
        position, never changes on update.

        :param user_id: Owner id (must exist; enforced by the FK).
        :param external_id: Canonical external catalog id.
        :param status: One of :data:`aniverse.models.tracked_item.TRACKED_STATUSES`.
        :param display: Subset of :data:`DISPLAY_FIELDS`.
        """
        provided = {k: v for k, v in display.items() if k in DISPLAY_FIELDS and v is not None}
        insert = self._upsert_insert()
        if insert is None:
            self._upsert_locked(user_id, external_id, status, provided)
            return

        values = {
            "user_id": user_id,
            "external_id": external_id,
            "status": status,
            "title": provided.get("title", ""),
            "poster_url": provided.get("poster_url", ""),
            "episodes_total": provided.get("episodes_total", 0),
        }
        stmt = insert.values(**values).on_conflict_do_update(
            index_elements=[TrackedItem.user_id, TrackedItem.external_id],
            set_={"status": status, "updated_at": func.now(), **provided},
        )
        self.session.execute(stmt)
        # Core-level write; loaded instances may hold the previous values.
        self.session.expire_all()

    def _upsert_locked(
        self, user_id: int, external_id: str, status: str, provided: Mapping[str, Any]
    ) -> None:
        """Fallback for dialects without native upsert: lock, then write."""
        stmt = (
            select(TrackedItem)
            .where(TrackedItem.user_id == user_id, TrackedItem.external_id == external_id)
            .with_for_update()
        )
        item = self.session.execute(stmt).scalars().first()
        if item is None:
            self.add(
                TrackedItem(
                    user_id=user_id,
                    external_id=external_id,
                    status=status,
                    title=provided.get("title", ""),
                    poster_url=provided.get("poster_url", ""),
                    episodes_total=provided.get("episodes_total", 0),
                )
            )
            return
        item.status = status
        for key, value in provided.items():
            setattr(item, key, value)
        self.flush()

    def delete_for_user(self, user_id: int, external_id: str) -> int:
        """Delete the item if present. Returns the number of rows removed (0 or 1)."""
        stmt = delete(TrackedItem).where(
            TrackedItem.user_id == user_id, TrackedItem.external_id == external_id
        )
        return int(self.session.execute(stmt).rowcount or 0)
