"""Ports for the external catalog and player providers."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol


@dataclass(frozen=True, slots=True)
class PlayerLink:
    """
    Result of a player lookup.

    :ivar player_link: Embeddable player URL.
    :ivar episodes_total: Episode count reported by the provider (0 if unknown).
    :ivar title: Title reported by the provider.
    """

    player_link: str
    episodes_total: int
    title: str


class CatalogProvider(Protocol):
    """Read-only anime metadata provider."""

    def search(self, params: Mapping[str, Any]) -> dict[str, Any]:
        """Search/browse titles; ``params`` are forwarded as query parameters."""

    def top(self, params: Mapping[str, Any]) -> dict[str, Any]:
        """Top-ranked titles."""

    def detail(self, anime_id: str) -> dict[str, Any]:
        """Full record of one title. Raises ``NotFoundError`` when unknown."""


class PlayerProvider(Protocol):
    """Player-link lookup keyed by an external catalog id."""

    def lookup(self, external_id: str) -> PlayerLink:
        """Return the player link. Raises ``NotFoundError`` when there is none."""


class StubCatalogProvider(CatalogProvider):
    """In-memory catalog used by tests and offline development."""

    def __init__(self, titles: Mapping[str, dict[str, Any]] | None = None) -> None:
        self.titles = dict(titles or {})

    def search(self, params: Mapping[str, Any]) -> dict[str, Any]:
        query = str(params.get("q", "")).lower()
        data = [t for t in self.titles.values() if query in str(t.get("title", "")).lower()]
        return {"data": data, "pagination": {"has_next_page": False}}

    def top(self, params: Mapping[str, Any]) -> dict[str, Any]:
        return {"data": list(self.titles.values()), "pagination": {"has_next_page": False}}

    def detail(self, anime_id: str) -> dict[str, Any]:
        from aniverse.services._shared.errors import NotFoundError

        try:
            return self.titles[anime_id]
        except KeyError:
            raise NotFoundError("Anime", anime_id) from None
