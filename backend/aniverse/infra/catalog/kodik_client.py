from __future__ import annotations

from typing import Any

from aniverse.infra.catalog.http import JsonHttpClient
from aniverse.services._shared.errors import ExternalUnavailableError, NotFoundError
from aniverse.services._shared.ports.catalog import PlayerLink, PlayerProvider

DEFAULT_KODIK_URL = "https://kodikapi.com"


class KodikClient(JsonHttpClient, PlayerProvider):
    """Kodik ``/search`` adapter resolving a Shikimori id to an embeddable player."""

    provider = "kodik"

    def __init__(
        self, base_url: str = DEFAULT_KODIK_URL, *, token: str | None = None, **kwargs: Any
    ) -> None:
        super().__init__(base_url, **kwargs)
        self.token = token

    def lookup(self, external_id: str) -> PlayerLink:
        if not self.token:
            raise ExternalUnavailableError(self.provider, "KODIK_API_TOKEN is not configured")

        body = self.get_json(
            "/search",
            {"token": self.token, "shikimori_id": external_id, "with_episodes": "true"},
            not_found_key=external_id,
        )
        results = body.get("results") if isinstance(body, dict) else None
        if not results:
            raise NotFoundError("Player", external_id)

        first = results[0]
        link = first.get("link") or ""
        if link.startswith("//"):
            link = f"https:{link}"
        episodes = first.get("episodes_total") or first.get("episodes_count") or 0
        return PlayerLink(
            player_link=link,
            episodes_total=int(episodes),
            title=first.get("title") or "",
        )
