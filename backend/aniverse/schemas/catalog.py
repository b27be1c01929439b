"""Catalog proxy schemas."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields, validate


class AnimeQuerySchema(Schema):
    """Browse/search parameters forwarded upstream; anything else is dropped."""

    class Meta:
        unknown = EXCLUDE

    q = fields.String(validate=validate.Length(max=200))
    page = fields.Integer(validate=validate.Range(min=1))
    limit = fields.Integer(validate=validate.Range(min=1, max=25))
    type = fields.String()
    status = fields.String()
    rating = fields.String()
    order_by = fields.String()
    sort = fields.String(validate=validate.OneOf(("asc", "desc")))
    genres = fields.String()
    min_score = fields.Float(validate=validate.Range(min=0, max=10))
    sfw = fields.Boolean()


class PlayerLinkSchema(Schema):
    player_link = fields.String(required=True, data_key="playerLink")
    episodes_total = fields.Integer(data_key="episodesTotal")
    title = fields.String()
