"""Profile and friendship endpoints."""

from __future__ import annotations

from flask import Blueprint, request

from aniverse.api.deps import (
    current_identity,
    json_response,
    optional_identity,
    require_auth,
    service_context,
    timing,
)
from aniverse.schemas import (
    ProfileSchema,
    ProfileUpdateSchema,
    RecentQuerySchema,
    StatsSchema,
    TrackedItemSchema,
)
from aniverse.services.profiles import ProfileService, ProfileUpdateIn
from aniverse.services.tracking import TrackedItemService

bp = Blueprint("users", __name__)

profile_schema = ProfileSchema()
profile_update_schema = ProfileUpdateSchema()
recent_query_schema = RecentQuerySchema()
stats_schema = StatsSchema()
items_schema = TrackedItemSchema(many=True)


def _profiles() -> ProfileService:
    return ProfileService(ctx=service_context())


@bp.get("/me")
@require_auth
@timing
def get_me():
    """Own profile, including pending incoming friend requests."""

    user_id = current_identity().user_id
    return json_response(profile_schema.dump(_profiles().get_profile(user_id, user_id)))


@bp.patch("/me")
@require_auth
@timing
def update_me():
    """Partially update the caller's profile fields."""

    data = profile_update_schema.load(request.get_json(silent=True) or {})
    profile = _profiles().update_profile(current_identity().user_id, ProfileUpdateIn(fields=data))
    return json_response(profile_schema.dump(profile))


@bp.get("/<int:user_id>")
@timing
def get_user(user_id: int):
    """Public profile; ``isFriend`` reflects the caller when a valid token is sent."""

    viewer = optional_identity()
    profile = _profiles().get_profile(user_id, viewer.user_id if viewer else None)
    return json_response(profile_schema.dump(profile))


@bp.get("/<int:user_id>/stats")
@timing
def get_user_stats(user_id: int):
    stats = TrackedItemService(ctx=service_context()).stats(user_id)
    return json_response(stats_schema.dump(stats))


@bp.get("/<int:user_id>/recent")
@timing
def get_user_recent(user_id: int):
    """Most recently updated list entries of a user."""

    query = recent_query_schema.load(request.args)
    items = TrackedItemService(ctx=service_context()).recent(user_id, query["limit"])
    return json_response(items_schema.dump(items))


@bp.post("/<int:user_id>/friend-request")
@require_auth
@timing
def send_friend_request(user_id: int):
    _profiles().request_friend(current_identity().user_id, user_id)
    return json_response({"ok": True})


@bp.post("/<int:user_id>/friend-accept")
@require_auth
@timing
def accept_friend_request(user_id: int):
    profile = _profiles().accept_friend(current_identity().user_id, user_id)
    return json_response(profile_schema.dump(profile))


@bp.delete("/<int:user_id>/friend")
@require_auth
@timing
def remove_friend(user_id: int):
    profile = _profiles().remove_friend(current_identity().user_id, user_id)
    return json_response(profile_schema.dump(profile))
