"""DTOs for the tracked-item list."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from aniverse.models.tracked_item import TrackedItem


@dataclass(frozen=True, slots=True)
class TrackedItemUpsertIn:
    """
    Input DTO for an upsert.

    :param external_id: Catalog id in any accepted form (int, integral float,
        or string); canonicalized by the service.
    :param status: Target status.
    :param title: Optional display title; ``None`` keeps the stored one.
    :param poster_url: Optional display poster; ``None`` keeps the stored one.
    :param episodes_total: Optional episode count; ``None`` keeps the stored one.
    """

    external_id: Any
    status: str
    title: str | None = None
    poster_url: str | None = None
    episodes_total: int | None = None

    def display_fields(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "poster_url": self.poster_url,
            "episodes_total": self.episodes_total,
        }


@dataclass(frozen=True, slots=True)
class TrackedItemOut:
    """One entry of a user's list."""

    external_id: str
    title: str
    poster_url: str
    episodes_total: int
    status: str

    @classmethod
    def from_model(cls, item: TrackedItem) -> TrackedItemOut:
        return cls(
            external_id=item.external_id,
            title=item.title or "",
            poster_url=item.poster_url or "",
            episodes_total=int(item.episodes_total or 0),
            status=item.status,
        )


@dataclass(frozen=True, slots=True)
class StatsOut:
    """
    Per-status counts of a list.

    ``total`` always equals the list length and the sum of the status counts.
    """

    total: int = 0
    watching: int = 0
    planned: int = 0
    completed: int = 0
    dropped: int = 0
