"""Small JSON-over-HTTP helper shared by the catalog adapters."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import requests

from aniverse.services._shared.errors import ExternalUnavailableError, NotFoundError

log = logging.getLogger(__name__)


class JsonHttpClient:
    """
    Thin :mod:`requests` wrapper with a bounded timeout and error mapping.

    * transport errors, timeouts, 5xx and non-JSON bodies -> ``ExternalUnavailableError``
    * 404 -> ``NotFoundError``
    * other 4xx -> ``ExternalUnavailableError`` (the request was ours, but the
      user can do nothing about it)

    No retries are attempted.
    """

    provider = "upstream"

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def get_json(
        self,
        path: str,
        params: Mapping[str, Any] | None = None,
        *,
        not_found_key: str | None = None,
    ) -> Any:
        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            resp = self.session.get(url, params=dict(params or {}), timeout=self.timeout)
        except requests.Timeout as exc:
            raise ExternalUnavailableError(self.provider, f"timeout after {self.timeout}s") from exc
        except requests.RequestException as exc:
            raise ExternalUnavailableError(self.provider, f"transport error: {exc}") from exc

        if resp.status_code == 404:
            raise NotFoundError(self.provider, not_found_key or path)
        if resp.status_code >= 400:
            log.warning(
                "%s answered %s for %s", self.provider, resp.status_code, path,
                extra={"event": "upstream.error"},
            )
            raise ExternalUnavailableError(self.provider, f"HTTP {resp.status_code}")
        try:
            return resp.json()
        except ValueError as exc:
            raise ExternalUnavailableError(self.provider, "invalid JSON body") from exc
