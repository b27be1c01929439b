"""Public catalog and player proxy endpoints."""

from __future__ import annotations

from typing import Any

from flask import Blueprint, current_app, request

from aniverse.api.deps import json_response, timing
from aniverse.infra.catalog.jikan_client import JikanClient
from aniverse.infra.catalog.kodik_client import KodikClient
from aniverse.schemas import AnimeQuerySchema, PlayerLinkSchema
from aniverse.services.catalog import CatalogService

bp = Blueprint("catalog", __name__)

anime_query_schema = AnimeQuerySchema()
player_link_schema = PlayerLinkSchema()

CATALOG_SERVICE_KEY = "catalog_service"


def _service() -> CatalogService:
    """Return the app's catalog service, building the HTTP adapters on first use."""
    service = current_app.extensions.get(CATALOG_SERVICE_KEY)
    if service is None:
        cfg = current_app.config
        timeout = float(cfg.get("EXTERNAL_HTTP_TIMEOUT", 10.0))
        service = CatalogService(
            catalog=JikanClient(cfg["JIKAN_BASE_URL"], timeout=timeout),
            player=KodikClient(
                cfg["KODIK_BASE_URL"], token=cfg.get("KODIK_API_TOKEN"), timeout=timeout
            ),
        )
        current_app.extensions[CATALOG_SERVICE_KEY] = service
    return service


def _query_params() -> dict[str, Any]:
    params = anime_query_schema.load(request.args)
    # requests would send Python booleans as "True"/"False"
    return {k: str(v).lower() if isinstance(v, bool) else v for k, v in params.items()}


@bp.get("/anime")
@timing
def search_anime():
    """Browse or search titles; the upstream envelope is returned unchanged."""

    return json_response(_service().search(_query_params()))


@bp.get("/anime/top")
@timing
def top_anime():
    return json_response(_service().top(_query_params()))


@bp.get("/anime/<string:anime_id>")
@timing
def anime_detail(anime_id: str):
    return json_response(_service().detail(anime_id))


@bp.get("/player/<string:shikimori_id>")
@timing
def player_link(shikimori_id: str):
    """Resolve an embeddable player for a Shikimori id."""

    return json_response(player_link_schema.dump(_service().player_link(shikimori_id)))
