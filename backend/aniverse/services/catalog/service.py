from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from aniverse.services._shared.base import BaseService
from aniverse.services._shared.errors import ValidationError
from aniverse.services._shared.ports.catalog import CatalogProvider, PlayerLink, PlayerProvider

#: Query parameters forwarded to the metadata provider.
SEARCH_PARAMS = frozenset(
    {"q", "page", "limit", "type", "status", "rating", "order_by", "sort", "genres", "min_score", "sfw"}
)


def _numeric_id(raw: Any, field: str) -> str:
    value = str(raw).strip() if raw is not None else ""
    if not value.isdigit() or int(value) <= 0:
        raise ValidationError(field, "Must be a positive integer.")
    return str(int(value))


class CatalogService(BaseService):
    """
    Read-only proxy over the metadata and player providers.

    No persistence is involved; upstream failures surface as
    ``ExternalUnavailableError`` and unknown ids as ``NotFoundError``.
    """

    def __init__(self, catalog: CatalogProvider, player: PlayerProvider) -> None:
        super().__init__()
        self.catalog = catalog
        self.player = player

    @staticmethod
    def _forwardable(params: Mapping[str, Any]) -> dict[str, Any]:
        return {k: v for k, v in params.items() if k in SEARCH_PARAMS and v not in (None, "")}

    def search(self, params: Mapping[str, Any]) -> dict[str, Any]:
        return self.catalog.search(self._forwardable(params))

    def top(self, params: Mapping[str, Any]) -> dict[str, Any]:
        return self.catalog.top(self._forwardable(params))

    def detail(self, anime_id: Any) -> dict[str, Any]:
        return self.catalog.detail(_numeric_id(anime_id, "id"))

    def player_link(self, shikimori_id: Any) -> PlayerLink:
        return self.player.lookup(_numeric_id(shikimori_id, "shikimoriId"))
