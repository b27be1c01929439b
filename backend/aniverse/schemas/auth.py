"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate

from aniverse.schemas.profile import UserPublicSchema


class RegisterSchema(Schema):
    """Input payload for account registration."""

    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(required=True, validate=validate.Length(min=3, max=32))


class LoginSchema(Schema):
    """Input payload for authenticating a user."""

    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(required=True, validate=validate.Length(min=1, max=128))


class AuthResponseSchema(Schema):
    """Body of register/login/refresh. The refresh token travels in the cookie only."""

    access_token = fields.String(required=True, data_key="accessToken")
    user = fields.Nested(UserPublicSchema, required=True)
