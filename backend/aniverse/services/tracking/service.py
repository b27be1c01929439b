from __future__ import annotations

import logging
import re
from typing import Any

from aniverse.models.tracked_item import (
    EXTERNAL_ID_MAX_LENGTH,
    POSTER_URL_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    TRACKED_STATUSES,
)
from aniverse.repositories.tracked_item import TrackedItemRepository
from aniverse.services._shared.base import BaseService
from aniverse.services._shared.errors import ValidationError
from aniverse.services.tracking.dto import StatsOut, TrackedItemOut, TrackedItemUpsertIn

log = logging.getLogger(__name__)

RECENT_DEFAULT_LIMIT = 10
RECENT_MAX_LIMIT = 50

# Digits with an optional all-zero fraction, e.g. "5114", "05114", "5114.0".
_INTEGRAL_ID = re.compile(r"(\d+)(?:\.0*)?")
_DISPLAY_LIMITS = {"title": TITLE_MAX_LENGTH, "poster_url": POSTER_URL_MAX_LENGTH}


def normalize_external_id(raw: Any) -> str:
    """
    Return the canonical string form of a catalog id.

    ``5114``, ``5114.0``, ``"5114"``, ``"5114.0"`` and ``" 5114 "`` all map
    to ``"5114"``, so the numeric and string forms address the same list
    entry. Other strings are kept as given (trimmed).

    :raises ValidationError: For booleans, blank strings, non-integral
        floats and any other type.
    """
    if isinstance(raw, bool):
        raise ValidationError("externalId", "Must be a string or an integer.")
    if isinstance(raw, int):
        value = str(raw)
    elif isinstance(raw, float):
        if not raw.is_integer():
            raise ValidationError("externalId", "Must be an integral number.")
        value = str(int(raw))
    elif isinstance(raw, str):
        value = raw.strip()
        match = _INTEGRAL_ID.fullmatch(value)
        if match and len(value) <= EXTERNAL_ID_MAX_LENGTH:
            value = str(int(match.group(1)))
    else:
        raise ValidationError("externalId", "Must be a string or an integer.")

    if not value:
        raise ValidationError("externalId", "Must not be empty.")
    if len(value) > EXTERNAL_ID_MAX_LENGTH:
        raise ValidationError("externalId", f"Must be at most {EXTERNAL_ID_MAX_LENGTH} characters.")
    return value


def normalize_status(raw: Any) -> str:
    value = raw.strip().lower() if isinstance(raw, str) else ""
    if value not in TRACKED_STATUSES:
        raise ValidationError("status", f"Must be one of: {', '.join(TRACKED_STATUSES)}.")
    return value


def _clean_display(fields: dict[str, Any]) -> dict[str, Any]:
    cleaned: dict[str, Any] = {}
    for key, limit in _DISPLAY_LIMITS.items():
        value = fields.get(key)
        if value is None:
            continue
        if not isinstance(value, str):
            raise ValidationError(key, "Must be a string.")
        if len(value) > limit:
            raise ValidationError(key, f"Must be at most {limit} characters.")
        cleaned[key] = value
    episodes = fields.get("episodes_total")
    if episodes is not None:
        if isinstance(episodes, bool) or not isinstance(episodes, int) or episodes < 0:
            raise ValidationError("episodes_total", "Must be a non-negative integer.")
        cleaned["episodes_total"] = episodes
    return cleaned


class TrackedItemService(BaseService):
    """
    Per-user watch list keyed by the canonical external id.

    Every mutating operation returns the full, updated list in list order.
    """

    def list(self, user_id: int) -> list[TrackedItemOut]:
        """
        Return the user's list (possibly empty).

        :raises NotFoundError: Unknown user.
        """
        with self.ro_uow() as uow:
            self.ensure_user_exists(uow, user_id)
            return self._snapshot(uow.tracked_items, user_id)

    def upsert(self, user_id: int, dto: TrackedItemUpsertIn) -> list[TrackedItemOut]:
        """
        Insert or update the entry with ``dto.external_id``.

        An existing entry keeps its position and gets the new status plus
        whichever display fields were supplied. A new entry is appended.

        :raises ValidationError: Bad id, status or display field.
        :raises NotFoundError: Unknown user.
        """
        external_id = normalize_external_id(dto.external_id)
        status = normalize_status(dto.status)
        display = _clean_display(dto.display_fields())

        with self.rw_uow() as uow:
            self.ensure_user_exists(uow, user_id)
            repo: TrackedItemRepository = uow.tracked_items
            repo.upsert(user_id=user_id, external_id=external_id, status=status, display=display)
            items = self._snapshot(repo, user_id)

        log.info(
            "tracked item upserted",
            extra={"event": "list.upsert", "user_id": user_id},
        )
        return items

    def remove(self, user_id: int, external_id: Any) -> list[TrackedItemOut]:
        """Remove the entry if present. Removing a missing id is not an error."""
        key = normalize_external_id(external_id)
        with self.rw_uow() as uow:
            self.ensure_user_exists(uow, user_id)
            repo: TrackedItemRepository = uow.tracked_items
            removed = repo.delete_for_user(user_id, key)
            items = self._snapshot(repo, user_id)

        if removed:
            log.info("tracked item removed", extra={"event": "list.remove", "user_id": user_id})
        return items

    def stats(self, user_id: int) -> StatsOut:
        """
        Count entries per status.

        :raises NotFoundError: Unknown user.
        """
        with self.ro_uow() as uow:
            self.ensure_user_exists(uow, user_id)
            counts = uow.tracked_items.count_by_status(user_id)
        return StatsOut(
            total=sum(counts.values()),
            watching=counts.get("watching", 0),
            planned=counts.get("planned", 0),
            completed=counts.get("completed", 0),
            dropped=counts.get("dropped", 0),
        )

    def recent(self, user_id: int, limit: int = RECENT_DEFAULT_LIMIT) -> list[TrackedItemOut]:
        """Most recently updated entries first; ``limit`` is clamped to 1..50."""
        limit = max(1, min(int(limit), RECENT_MAX_LIMIT))
        with self.ro_uow() as uow:
            self.ensure_user_exists(uow, user_id)
            rows = uow.tracked_items.recent_for_user(user_id, limit)
            return [TrackedItemOut.from_model(row) for row in rows]

    @staticmethod
    def _snapshot(repo: TrackedItemRepository, user_id: int) -> list[TrackedItemOut]:
        return [TrackedItemOut.from_model(row) for row in repo.list_for_user(user_id)]
