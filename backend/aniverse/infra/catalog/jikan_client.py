from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from aniverse.infra.catalog.http import JsonHttpClient
from aniverse.services._shared.errors import ExternalUnavailableError, NotFoundError
from aniverse.services._shared.ports.catalog import CatalogProvider

DEFAULT_JIKAN_URL = "https://api.jikan.moe/v4"


class JikanClient(JsonHttpClient, CatalogProvider):
    """Jikan v4 (MyAnimeList mirror) adapter for :class:`CatalogProvider`."""

    provider = "jikan"

    def __init__(self, base_url: str = DEFAULT_JIKAN_URL, **kwargs: Any) -> None:
        super().__init__(base_url, **kwargs)

    def search(self, params: Mapping[str, Any]) -> dict[str, Any]:
        """``GET /anime``; the upstream envelope (``data`` + ``pagination``) is returned as-is."""
        return self.get_json("/anime", params)

    def top(self, params: Mapping[str, Any]) -> dict[str, Any]:
        return self.get_json("/top/anime", params)

    def detail(self, anime_id: str) -> dict[str, Any]:
        """``GET /anime/{id}/full``, unwrapped from its ``data`` envelope."""
        body = self.get_json(f"/anime/{anime_id}/full", not_found_key=anime_id)
        if not isinstance(body, dict):
            raise ExternalUnavailableError(self.provider, "unexpected response shape")
        data = body.get("data")
        if not data:
            raise NotFoundError("Anime", anime_id)
        return data
