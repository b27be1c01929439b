"""Profile and friendship schemas (camelCase on the wire)."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields, validate

from aniverse.models.user import SOCIAL_LINK_KEYS


class UserPublicSchema(Schema):
    """Public user representation. Never includes the password hash."""

    id = fields.Integer(required=True)
    email = fields.Email(required=True)
    nickname = fields.String(allow_none=True)
    bio = fields.String(allow_none=True)
    avatar_path = fields.String(allow_none=True, data_key="avatarPath")
    cover_path = fields.String(allow_none=True, data_key="coverPath")
    social_links = fields.Dict(keys=fields.String(), values=fields.String(), data_key="socialLinks")
    badge = fields.String(allow_none=True)


class FriendBriefSchema(Schema):
    id = fields.Integer(required=True)
    nickname = fields.String(allow_none=True)
    avatar_path = fields.String(allow_none=True, data_key="avatarPath")


class ProfileSchema(Schema):
    """Profile page payload."""

    user = fields.Nested(UserPublicSchema, required=True)
    friends = fields.List(fields.Nested(FriendBriefSchema))
    is_friend = fields.Boolean(data_key="isFriend")
    incoming_requests = fields.List(fields.Nested(FriendBriefSchema), data_key="incomingRequests")


class ProfileUpdateSchema(Schema):
    """Partial profile update; unknown keys are ignored, email/password cannot be changed here."""

    class Meta:
        unknown = EXCLUDE

    nickname = fields.String(allow_none=True, validate=validate.Length(max=50))
    bio = fields.String(allow_none=True, validate=validate.Length(max=2000))
    avatar_path = fields.String(allow_none=True, data_key="avatarPath", validate=validate.Length(max=255))
    cover_path = fields.String(allow_none=True, data_key="coverPath", validate=validate.Length(max=255))
    social_links = fields.Dict(
        keys=fields.String(validate=validate.OneOf(SOCIAL_LINK_KEYS)),
        values=fields.String(allow_none=True),
        allow_none=True,
        data_key="socialLinks",
    )
    badge = fields.String(allow_none=True, validate=validate.Length(max=32))


class RecentQuerySchema(Schema):
    """``?limit=`` for the recent-activity feed, clamped by the service."""

    limit = fields.Integer(load_default=10)
