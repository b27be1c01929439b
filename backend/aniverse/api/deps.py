"""Shared API helpers: the bearer gate, the refresh cookie and response utilities."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar

from flask import Response, current_app, g, jsonify, request

from aniverse.core.errors import Unauthenticated
from aniverse.core.security import get_token_service
from aniverse.services._shared.base import ServiceContext
from aniverse.services.tokens import Identity

F = TypeVar("F", bound=Callable[..., Any])

BEARER_SCHEME = "bearer"


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]


# --------------------------------------------------------------------------- #
# Request gate
# --------------------------------------------------------------------------- #


def _bearer_token() -> str | None:
    """Extract the token of an ``Authorization: Bearer <token>`` header, if well-formed."""
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.strip().partition(" ")
    if scheme.lower() != BEARER_SCHEME:
        return None
    token = token.strip()
    return token or None


def optional_identity() -> Identity | None:
    """Return the caller's identity when a valid access token is present, else ``None``."""
    token = _bearer_token()
    if token is None:
        return None
    identity = get_token_service().verify_access_token(token)
    if identity is not None:
        g.identity = identity
    return identity


def require_auth(func: F) -> F:
    """
    Admit the request only with a valid access token.

    On success ``g.identity`` holds the decoded :class:`Identity`; the user
    row is not re-fetched and nothing is written. Every failure is the same
    401 ``unauthenticated``.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        token = _bearer_token()
        if token is None:
            current_app.logger.info("gate: missing or malformed Authorization header")
            raise Unauthenticated()
        identity = get_token_service().verify_access_token(token)
        if identity is None:
            current_app.logger.info("gate: access token rejected")
            raise Unauthenticated()
        g.identity = identity
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def current_identity() -> Identity:
    """Identity admitted by :func:`require_auth` for this request."""
    return g.identity


def service_context() -> ServiceContext:
    identity = g.get("identity")
    return ServiceContext(
        actor_id=getattr(identity, "user_id", None),
        request_id=g.get("request_id"),
    )


# --------------------------------------------------------------------------- #
# Refresh cookie
# --------------------------------------------------------------------------- #


def _cookie_options() -> dict[str, Any]:
    cfg = current_app.config
    return {
        "httponly": True,
        "secure": bool(cfg.get("REFRESH_COOKIE_SECURE", False)),
        "samesite": cfg.get("REFRESH_COOKIE_SAMESITE", "Lax"),
        "path": cfg.get("API_BASE_PREFIX", "/api") or "/",
    }


def refresh_cookie_name() -> str:
    return current_app.config.get("REFRESH_COOKIE_NAME", "refreshToken")


def read_refresh_cookie() -> str | None:
    return request.cookies.get(refresh_cookie_name()) or None


def set_refresh_cookie(response: Response, token: str) -> Response:
    """Attach the refresh token as an HTTP-only cookie living as long as the token."""
    max_age = int(get_token_service().config.refresh_ttl.total_seconds())
    response.set_cookie(refresh_cookie_name(), token, max_age=max_age, **_cookie_options())
    return response


def clear_refresh_cookie(response: Response) -> Response:
    response.delete_cookie(refresh_cookie_name(), **_cookie_options())
    return response
