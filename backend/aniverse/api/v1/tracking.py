"""Watch-list endpoints of the authenticated user."""

from __future__ import annotations

from flask import Blueprint, request

from aniverse.api.deps import current_identity, json_response, require_auth, service_context, timing
from aniverse.schemas import StatsSchema, TrackedItemInSchema, TrackedItemSchema
from aniverse.services.tracking import TrackedItemService, TrackedItemUpsertIn

bp = Blueprint("tracking", __name__)

item_in_schema = TrackedItemInSchema()
items_schema = TrackedItemSchema(many=True)
stats_schema = StatsSchema()


def _service() -> TrackedItemService:
    return TrackedItemService(ctx=service_context())


@bp.get("")
@require_auth
@timing
def list_items():
    """Return the caller's list in list order."""

    items = _service().list(current_identity().user_id)
    return json_response(items_schema.dump(items))


@bp.post("")
@require_auth
@timing
def upsert_item():
    """Insert or update one entry; returns the whole list."""

    data = item_in_schema.load(request.get_json(silent=True) or {})
    dto = TrackedItemUpsertIn(
        external_id=data["external_id"],
        status=data["status"],
        title=data.get("title"),
        poster_url=data.get("poster_url"),
        episodes_total=data.get("episodes_total"),
    )
    items = _service().upsert(current_identity().user_id, dto)
    return json_response(items_schema.dump(items))


@bp.delete("/<string:external_id>")
@require_auth
@timing
def remove_item(external_id: str):
    """Remove one entry; removing a missing id returns the unchanged list."""

    items = _service().remove(current_identity().user_id, external_id)
    return json_response(items_schema.dump(items))


@bp.get("/stats")
@require_auth
@timing
def stats():
    return json_response(stats_schema.dump(_service().stats(current_identity().user_id)))
