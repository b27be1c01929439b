from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta
from typing import Any


@dataclass(frozen=True, slots=True)
class Identity:
    """
    Identity carried inside both token classes.

    :param user_id: User primary key.
    :type user_id: int
    :param email: Normalized email at issuance time.
    :type email: str
    """

    user_id: int
    email: str


@dataclass(frozen=True, slots=True)
class TokenPair:
    """
    Freshly minted access + refresh tokens.

    :param access_token: Short-lived JWT, returned in the response body.
    :param refresh_token: Long-lived JWT, delivered only as an HTTP-only cookie.
    """

    access_token: str
    refresh_token: str


@dataclass(frozen=True, slots=True)
class TokenConfig:
    """
    Token emission configuration, built once at startup and injected.

    :param access_secret: Key signing access tokens.
    :param refresh_secret: Key signing refresh tokens; must differ from ``access_secret``.
    :param access_ttl: Access token lifetime.
    :param refresh_ttl: Refresh token lifetime (also the cookie ``Max-Age``).
    :param algorithm: JWS algorithm understood by PyJWT.
    :param issuer: ``iss`` claim written and required on decode.
    :raises ValueError: On empty or identical secrets, or non-positive lifetimes.
    """

    access_secret: str
    refresh_secret: str
    access_ttl: timedelta = timedelta(minutes=30)
    refresh_ttl: timedelta = timedelta(days=30)
    algorithm: str = "HS256"
    issuer: str = "aniverse"

    def __post_init__(self) -> None:
        if not self.access_secret or not self.refresh_secret:
            raise ValueError("Both access and refresh signing secrets are required.")
        if self.access_secret == self.refresh_secret:
            raise ValueError("Access and refresh signing secrets must differ.")
        if self.access_ttl <= timedelta(0) or self.refresh_ttl <= timedelta(0):
            raise ValueError("Token lifetimes must be positive.")

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> TokenConfig:
        """
        Build the config from Flask settings.

        :raises RuntimeError: When the secrets are missing or invalid, so the
            application fails at startup instead of on the first request.
        """
        try:
            return cls(
                access_secret=config.get("ACCESS_TOKEN_SECRET") or "",
                refresh_secret=config.get("REFRESH_TOKEN_SECRET") or "",
                access_ttl=timedelta(seconds=int(config.get("ACCESS_TOKEN_TTL_SECONDS", 1800))),
                refresh_ttl=timedelta(
                    seconds=int(config.get("REFRESH_TOKEN_TTL_SECONDS", 30 * 24 * 3600))
                ),
                algorithm=config.get("JWT_ALGORITHM", "HS256"),
                issuer=config.get("JWT_ISSUER", "aniverse"),
            )
        except ValueError as exc:
            raise RuntimeError(
                f"Invalid token configuration (ACCESS_TOKEN_SECRET / REFRESH_TOKEN_SECRET): {exc}"
            ) from exc
