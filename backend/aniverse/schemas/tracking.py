"""Tracked-item list schemas."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from marshmallow import EXCLUDE, Schema, fields, pre_load, validate

from aniverse.models.tracked_item import POSTER_URL_MAX_LENGTH, TITLE_MAX_LENGTH, TRACKED_STATUSES

#: Legacy id keys accepted in place of ``externalId``, in priority order.
EXTERNAL_ID_ALIASES = ("shikimori_id", "mal_id")

#: Keys of the nested ``animeData`` object and their top-level equivalents.
_ANIME_DATA_KEYS = {
    "title": "title",
    "poster_url": "posterUrl",
    "posterUrl": "posterUrl",
    "episodes_total": "episodesTotal",
    "episodesTotal": "episodesTotal",
}


class TrackedItemInSchema(Schema):
    """
    Upsert payload for ``POST /list``.

    Accepts ``externalId`` or one of :data:`EXTERNAL_ID_ALIASES`, and display
    fields either at top level or nested in ``animeData``. The id keeps its
    raw JSON type here; canonicalization happens in the service.
    """

    class Meta:
        unknown = EXCLUDE

    external_id = fields.Raw(required=True, data_key="externalId")
    status = fields.String(required=True, validate=validate.OneOf(TRACKED_STATUSES))
    title = fields.String(allow_none=True, validate=validate.Length(max=TITLE_MAX_LENGTH))
    poster_url = fields.String(
        allow_none=True, data_key="posterUrl", validate=validate.Length(max=POSTER_URL_MAX_LENGTH)
    )
    episodes_total = fields.Integer(
        allow_none=True, strict=True, data_key="episodesTotal", validate=validate.Range(min=0)
    )

    @pre_load
    def unfold_aliases(self, data: Any, **_: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        merged = dict(data)

        nested = merged.pop("animeData", None)
        if isinstance(nested, Mapping):
            for key, target in _ANIME_DATA_KEYS.items():
                if key in nested and merged.get(target) is None:
                    merged[target] = nested[key]

        if merged.get("externalId") in (None, ""):
            for alias in EXTERNAL_ID_ALIASES:
                if merged.get(alias) not in (None, ""):
                    merged["externalId"] = merged[alias]
                    break
        for alias in EXTERNAL_ID_ALIASES:
            merged.pop(alias, None)
        return merged


class TrackedItemSchema(Schema):
    """One list entry as returned to clients."""

    external_id = fields.String(required=True, data_key="externalId")
    title = fields.String()
    poster_url = fields.String(data_key="posterUrl")
    episodes_total = fields.Integer(data_key="episodesTotal")
    status = fields.String(required=True)


class StatsSchema(Schema):
    total = fields.Integer(required=True)
    watching = fields.Integer(required=True)
    planned = fields.Integer(required=True)
    completed = fields.Integer(required=True)
    dropped = fields.Integer(required=True)
