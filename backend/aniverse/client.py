"""
Python client for the aniverse HTTP API.

The access token is held in memory; the refresh token never leaves the
session's cookie jar, exactly like a browser would keep the HTTP-only cookie.
A request answered with 401 triggers a single ``GET /refresh`` and, if that
succeeds, one replay of the original request.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0
REFRESH_PATH = "/refresh"


class ApiClientError(Exception):
    """
    Non-2xx answer from the API.

    :ivar status: HTTP status code.
    :ivar code: Stable error code from the problem+json body (``"error"`` if absent).
    :ivar detail: Human-readable message from the body.
    """

    def __init__(self, status: int, code: str, detail: str = "") -> None:
        super().__init__(f"{status} {code}: {detail}")
        self.status = status
        self.code = code
        self.detail = detail

    @classmethod
    def from_response(cls, resp: requests.Response) -> ApiClientError:
        try:
            body = resp.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        return cls(resp.status_code, str(body.get("code") or "error"), str(body.get("detail") or ""))


class SessionExpiredError(ApiClientError):
    """The session could not be refreshed; the caller must log in again."""

    def __init__(self, detail: str = "Session expired") -> None:
        super().__init__(401, "unauthenticated", detail)


class ApiClient:
    """
    Thin :mod:`requests` client keeping the session alive across access-token expiry.

    :param base_url: API root including the version, e.g. ``http://localhost:5000/api/v1``.
    :param timeout: Per-request timeout in seconds.
    :param session: Optional pre-configured :class:`requests.Session`.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.access_token: str | None = None

    # ------------------------------------------------------------------ #
    # Transport
    # ------------------------------------------------------------------ #

    def _send(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        headers = dict(kwargs.pop("headers", None) or {})
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        return self.session.request(
            method, f"{self.base_url}{path}", headers=headers, timeout=self.timeout, **kwargs
        )

    def _refresh(self) -> None:
        """Exchange the refresh cookie for a new access token, or expire the session."""
        try:
            resp = self._send("GET", REFRESH_PATH)
        except requests.RequestException as exc:
            self.access_token = None
            log.info("session refresh failed: %s", exc.__class__.__name__)
            raise SessionExpiredError("Session refresh failed") from exc
        if resp.status_code != 200:
            self.access_token = None
            log.info("session refresh failed with %s", resp.status_code)
            raise SessionExpiredError()
        try:
            token = resp.json().get("accessToken")
        except (ValueError, AttributeError):
            token = None
        if not token:
            self.access_token = None
            raise SessionExpiredError("Refresh answered without an access token")
        self.access_token = token

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        resp = self._send(method, path, **kwargs)
        if resp.status_code == 401 and path != REFRESH_PATH:
            self._refresh()
            # One replay only; a second 401 is reported as-is.
            resp = self._send(method, path, **kwargs)
        if not resp.ok:
            raise ApiClientError.from_response(resp)
        return resp.json() if resp.content else None

    # ------------------------------------------------------------------ #
    # Session
    # ------------------------------------------------------------------ #

    def _store_session(self, body: dict[str, Any]) -> dict[str, Any]:
        self.access_token = body.get("accessToken")
        return body.get("user") or {}

    def register(self, email: str, password: str) -> dict[str, Any]:
        """Create an account; returns the public user and keeps the session."""
        return self._store_session(
            self._request("POST", "/register", json={"email": email, "password": password})
        )

    def login(self, email: str, password: str) -> dict[str, Any]:
        return self._store_session(
            self._request("POST", "/login", json={"email": email, "password": password})
        )

    def logout(self) -> None:
        try:
            self._request("POST", "/logout")
        finally:
            self.access_token = None

    def check_auth(self) -> dict[str, Any] | None:
        """
        Restore a session from the refresh cookie (e.g. on startup).

        :returns: The public user, or ``None`` when there is no usable session.
        """
        resp = self._send("GET", REFRESH_PATH)
        if resp.status_code != 200:
            self.access_token = None
            return None
        return self._store_session(resp.json())

    # ------------------------------------------------------------------ #
    # Watch list
    # ------------------------------------------------------------------ #

    def get_list(self) -> list[dict[str, Any]]:
        return self._request("GET", "/list")

    def upsert_item(
        self,
        external_id: str | int,
        status: str,
        *,
        title: str | None = None,
        poster_url: str | None = None,
        episodes_total: int | None = None,
    ) -> list[dict[str, Any]]:
        """Insert or update one entry; returns the whole list."""
        payload: dict[str, Any] = {"externalId": external_id, "status": status}
        if title is not None:
            payload["title"] = title
        if poster_url is not None:
            payload["posterUrl"] = poster_url
        if episodes_total is not None:
            payload["episodesTotal"] = episodes_total
        return self._request("POST", "/list", json=payload)

    def remove_item(self, external_id: str | int) -> list[dict[str, Any]]:
        return self._request("DELETE", f"/list/{external_id}")

    def stats(self) -> dict[str, int]:
        return self._request("GET", "/list/stats")


__all__ = ["ApiClient", "ApiClientError", "SessionExpiredError"]
