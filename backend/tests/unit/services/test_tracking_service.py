"""Unit tests for TrackedItemService."""

from __future__ import annotations

import random

import pytest

from aniverse.models.tracked_item import POSTER_URL_MAX_LENGTH, TITLE_MAX_LENGTH, TRACKED_STATUSES
from aniverse.services._shared.errors import NotFoundError, ValidationError
from aniverse.services.tracking import TrackedItemService, TrackedItemUpsertIn
from aniverse.services.tracking.service import normalize_external_id
from tests.factories.user import UserFactory


@pytest.fixture()
def service(app) -> TrackedItemService:
    return TrackedItemService()


@pytest.fixture()
def user(app):
    return UserFactory()


# ------------------------------ Id canonicalization ------------------------ #
@pytest.mark.parametrize("raw", [5114, 5114.0, "5114", " 5114 ", "5114.0", "5114.00", "05114"])
def test_numeric_and_string_ids_share_one_form(raw):
    assert normalize_external_id(raw) == "5114"


@pytest.mark.parametrize("raw", [True, None, "", "   ", 1.5, ["1"], "x" * 65])
def test_bad_ids_rejected(raw):
    with pytest.raises(ValidationError):
        normalize_external_id(raw)


@pytest.mark.parametrize("raw", ["5114.5", "abc-12", "12a"])
def test_non_integral_strings_kept_verbatim(raw):
    assert normalize_external_id(raw) == raw


# ------------------------------ Upsert ------------------------------------- #
def test_double_upsert_leaves_one_item_with_last_status(service, user):
    service.upsert(user.id, TrackedItemUpsertIn(external_id="5114", status="planned"))
    items = service.upsert(user.id, TrackedItemUpsertIn(external_id=5114, status="watching"))

    assert len(items) == 1
    assert items[0].external_id == "5114"
    assert items[0].status == "watching"


def test_new_items_are_appended_and_updates_keep_position(service, user):
    for ext in ("1", "2", "3"):
        service.upsert(user.id, TrackedItemUpsertIn(external_id=ext, status="planned"))
    items = service.upsert(user.id, TrackedItemUpsertIn(external_id="1", status="completed"))

    assert [i.external_id for i in items] == ["1", "2", "3"]
    assert items[0].status == "completed"


def test_upsert_keeps_display_fields_not_supplied(service, user):
    service.upsert(
        user.id,
        TrackedItemUpsertIn(
            external_id="21", status="watching", title="One Piece", poster_url="p.jpg", episodes_total=1100
        ),
    )
    [item] = service.upsert(user.id, TrackedItemUpsertIn(external_id="21", status="dropped"))

    assert (item.title, item.poster_url, item.episodes_total) == ("One Piece", "p.jpg", 1100)


def test_on_hold_rejected(service, user):
    with pytest.raises(ValidationError):
        service.upsert(user.id, TrackedItemUpsertIn(external_id="1", status="on_hold"))
    assert service.list(user.id) == []


def test_negative_episodes_rejected(service, user):
    with pytest.raises(ValidationError):
        service.upsert(user.id, TrackedItemUpsertIn(external_id="1", status="planned", episodes_total=-1))


def test_unknown_user(service, app):
    with pytest.raises(NotFoundError):
        service.list(999)
    with pytest.raises(NotFoundError):
        service.upsert(999, TrackedItemUpsertIn(external_id="1", status="planned"))


def test_lists_are_per_user(service, user):
    other = UserFactory()
    service.upsert(user.id, TrackedItemUpsertIn(external_id="1", status="planned"))
    assert service.list(other.id) == []


# ------------------------------ Remove ------------------------------------- #
def test_remove_missing_id_returns_unchanged_list(service, user):
    before = service.upsert(user.id, TrackedItemUpsertIn(external_id="1", status="planned"))
    assert service.remove(user.id, "404") == before


def test_remove_accepts_numeric_id(service, user):
    service.upsert(user.id, TrackedItemUpsertIn(external_id="7", status="planned"))
    assert service.remove(user.id, 7) == []


# ------------------------------ Stats -------------------------------------- #
def test_stats_match_list_for_random_sequence(service, user):
    rng = random.Random(42)
    for _ in range(40):
        ext = str(rng.randint(1, 8))
        if rng.random() < 0.25:
            items = service.remove(user.id, ext)
        else:
            items = service.upsert(
                user.id, TrackedItemUpsertIn(external_id=ext, status=rng.choice(TRACKED_STATUSES))
            )
        stats = service.stats(user.id)
        assert stats.total == len(items)
        assert stats.watching + stats.planned + stats.completed + stats.dropped == stats.total
        for status in TRACKED_STATUSES:
            assert getattr(stats, status) == sum(1 for i in items if i.status == status)


def test_stats_empty_list(service, user):
    stats = service.stats(user.id)
    assert (stats.total, stats.watching, stats.planned, stats.completed, stats.dropped) == (0, 0, 0, 0, 0)


# ------------------------------ Recent ------------------------------------- #
@pytest.mark.parametrize("limit,expected", [(0, 1), (2, 2), (500, 3)])
def test_recent_limit_is_clamped(service, user, limit, expected):
    for ext in ("1", "2", "3"):
        service.upsert(user.id, TrackedItemUpsertIn(external_id=ext, status="planned"))
    assert len(service.recent(user.id, limit)) == expected


@pytest.mark.parametrize(
    "field, value",
    [
        ("title", "t" * (TITLE_MAX_LENGTH + 1)),
        ("poster_url", "p" * (POSTER_URL_MAX_LENGTH + 1)),
    ],
)
def test_display_fields_longer_than_columns_rejected(service, user, field, value):
    with pytest.raises(ValidationError):
        service.upsert(user.id, TrackedItemUpsertIn(external_id="21", status="planned", **{field: value}))
    assert service.list(user.id) == []
