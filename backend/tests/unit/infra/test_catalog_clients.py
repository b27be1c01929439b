"""Unit tests for the Jikan and Kodik HTTP adapters, mocked with ``responses``."""

from __future__ import annotations

import pytest
import requests
import responses

from aniverse.infra.catalog.jikan_client import JikanClient
from aniverse.infra.catalog.kodik_client import KodikClient
from aniverse.services._shared.errors import ExternalUnavailableError, NotFoundError

JIKAN = "https://jikan.test/v4"
KODIK = "https://kodik.test"


@pytest.fixture()
def jikan() -> JikanClient:
    return JikanClient(JIKAN, timeout=2)


@pytest.fixture()
def kodik() -> KodikClient:
    return KodikClient(KODIK, token="secret", timeout=2)


@responses.activate
def test_search_forwards_params_and_returns_envelope(jikan):
    responses.add(
        responses.GET,
        f"{JIKAN}/anime",
        json={"data": [{"mal_id": 21}], "pagination": {"has_next_page": True}},
        match=[responses.matchers.query_param_matcher({"q": "one piece", "page": "2"})],
    )

    body = jikan.search({"q": "one piece", "page": 2})

    assert body["data"][0]["mal_id"] == 21
    assert body["pagination"]["has_next_page"] is True


@responses.activate
def test_top(jikan):
    responses.add(responses.GET, f"{JIKAN}/top/anime", json={"data": []})
    assert jikan.top({}) == {"data": []}


@responses.activate
def test_detail_unwraps_data(jikan):
    responses.add(responses.GET, f"{JIKAN}/anime/21/full", json={"data": {"mal_id": 21, "episodes": None}})
    assert jikan.detail("21") == {"mal_id": 21, "episodes": None}


@responses.activate
def test_detail_404_is_not_found(jikan):
    responses.add(responses.GET, f"{JIKAN}/anime/99999/full", status=404, json={"status": 404})
    with pytest.raises(NotFoundError):
        jikan.detail("99999")


@pytest.mark.parametrize("status", [429, 500, 503])
@responses.activate
def test_upstream_errors_are_unavailable(jikan, status):
    responses.add(responses.GET, f"{JIKAN}/anime", status=status)
    with pytest.raises(ExternalUnavailableError) as exc:
        jikan.search({})
    assert exc.value.provider == "jikan"


@responses.activate
def test_timeout_is_unavailable(jikan):
    responses.add(responses.GET, f"{JIKAN}/anime", body=requests.exceptions.ReadTimeout("slow"))
    with pytest.raises(ExternalUnavailableError):
        jikan.search({})
    assert len(responses.calls) == 1  # no retries


@responses.activate
def test_invalid_json_is_unavailable(jikan):
    responses.add(responses.GET, f"{JIKAN}/anime", body="<html>", content_type="text/html")
    with pytest.raises(ExternalUnavailableError):
        jikan.search({})


@responses.activate
def test_kodik_lookup(kodik):
    responses.add(
        responses.GET,
        f"{KODIK}/search",
        json={"results": [{"link": "//kodik.info/serial/1/abc/720p", "episodes_count": 1100, "title": "Ван-Пис"}]},
        match=[
            responses.matchers.query_param_matcher(
                {"token": "secret", "shikimori_id": "21", "with_episodes": "true"}
            )
        ],
    )

    link = kodik.lookup("21")

    assert link.player_link == "https://kodik.info/serial/1/abc/720p"
    assert link.episodes_total == 1100
    assert link.title == "Ван-Пис"


@responses.activate
def test_kodik_empty_results_is_not_found(kodik):
    responses.add(responses.GET, f"{KODIK}/search", json={"results": []})
    with pytest.raises(NotFoundError):
        kodik.lookup("1")


def test_kodik_without_token_is_unavailable():
    with pytest.raises(ExternalUnavailableError):
        KodikClient(KODIK, token=None).lookup("21")
