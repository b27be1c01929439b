from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import uuid4

import jwt

from aniverse.services._shared.ports.refresh_token_store import (
    RefreshRecord,
    RefreshTokenStore,
    RotationResult,
)
from aniverse.services.tokens.dto import Identity, TokenConfig, TokenPair

log = logging.getLogger(__name__)

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"

_REQUIRED_CLAIMS = ["sub", "email", "type", "iat", "exp", "jti"]


def _utcnow() -> datetime:
    return datetime.now(UTC)


class TokenService:
    """
    Mint and verify access/refresh JWTs and manage the live refresh record.

    Tokens are signed with PyJWT using two distinct keys from
    :class:`TokenConfig`, so an access token can never pass as a refresh
    token (and vice versa) even before the ``type`` claim is checked.

    Verification never raises: any malformed, mis-signed, expired or
    wrong-type token yields ``None``. Callers map that to ``Unauthenticated``.
    """

    def __init__(
        self,
        config: TokenConfig,
        store: RefreshTokenStore,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """
        :param config: Signing keys, lifetimes and algorithm.
        :param store: Refresh record store (one live token per user).
        :param clock: Source of "now" (UTC, timezone-aware). Defaults to the wall clock.
        """
        self.config = config
        self.store = store
        self.clock = clock or _utcnow

    # ------------------------------------------------------------------ #
    # Issuance
    # ------------------------------------------------------------------ #

    def issue_token_pair(self, identity: Identity) -> TokenPair:
        """Sign a new access/refresh pair for ``identity``. No side effects."""
        now = self.clock()
        return TokenPair(
            access_token=self._encode(
                identity, ACCESS_TOKEN_TYPE, self.config.access_secret, now, self.config.access_ttl
            ),
            refresh_token=self._encode(
                identity,
                REFRESH_TOKEN_TYPE,
                self.config.refresh_secret,
                now,
                self.config.refresh_ttl,
            ),
        )

    def _encode(
        self, identity: Identity, kind: str, secret: str, now: datetime, ttl: timedelta
    ) -> str:
        payload: dict[str, Any] = {
            "sub": str(identity.user_id),
            "email": identity.email,
            "type": kind,
            "iss": self.config.issuer,
            "iat": int(now.timestamp()),
            "exp": int((now + ttl).timestamp()),
            # Unique per token, so two pairs minted in the same second differ.
            "jti": uuid4().hex,
        }
        return jwt.encode(payload, secret, algorithm=self.config.algorithm)

    # ------------------------------------------------------------------ #
    # Verification
    # ------------------------------------------------------------------ #

    def verify_access_token(self, token: str | None) -> Identity | None:
        """Return the identity of a valid access token, else ``None``."""
        return self._decode(token, ACCESS_TOKEN_TYPE, self.config.access_secret)

    def verify_refresh_token(self, token: str | None) -> Identity | None:
        """Return the identity of a valid refresh token, else ``None``."""
        return self._decode(token, REFRESH_TOKEN_TYPE, self.config.refresh_secret)

    def _decode(self, token: str | None, kind: str, secret: str) -> Identity | None:
        if not token or not isinstance(token, str):
            return None
        try:
            # Expiry is checked against the injected clock below.
            claims = jwt.decode(
                token,
                secret,
                algorithms=[self.config.algorithm],
                issuer=self.config.issuer,
                options={"require": _REQUIRED_CLAIMS, "verify_exp": False, "verify_iat": False},
            )
        except jwt.InvalidTokenError as exc:
            log.debug("token rejected: kind=%s error=%s", kind, type(exc).__name__)
            return None

        if claims.get("type") != kind:
            return None
        exp = claims.get("exp")
        if not isinstance(exp, int) or exp <= int(self.clock().timestamp()):
            return None
        sub, email = claims.get("sub"), claims.get("email")
        if not isinstance(sub, str) or not sub.isdigit() or not isinstance(email, str):
            return None
        return Identity(user_id=int(sub), email=email)

    # ------------------------------------------------------------------ #
    # Refresh record (single live token per user)
    # ------------------------------------------------------------------ #

    def persist_refresh_token(self, user_id: int, token: str) -> None:
        """Replace the user's live refresh token; every earlier one stops working."""
        self.store.replace_for_user(user_id, token)

    def lookup_refresh_token(self, token: str) -> RefreshRecord | None:
        return self.store.find(token)

    def rotate_refresh_token(self, user_id: int, old_token: str, new_token: str) -> RotationResult:
        """Compare-and-swap the live token; see :class:`RotationResult`."""
        return self.store.rotate(user_id, old_token, new_token)

    def delete_refresh_token(self, token: str) -> bool:
        """Remove the record of ``token``; absent tokens are not an error."""
        return self.store.delete(token)

    def revoke_user(self, user_id: int) -> bool:
        """Drop the user's live record, forcing a new login everywhere."""
        return self.store.delete_for_user(user_id)

    def has_live_session(self, user_id: int) -> bool:
        return self.store.get_for_user(user_id) is not None
