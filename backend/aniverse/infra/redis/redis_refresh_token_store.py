from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar

import redis

from aniverse.services._shared.ports.refresh_token_store import (
    RefreshRecord,
    RefreshTokenStore,
    RotationResult,
    token_fingerprint,
)

T = TypeVar("T")


def _text(value: bytes | str | None) -> str | None:
    if value is None:
        return None
    return value.decode() if isinstance(value, bytes | bytearray) else str(value)


@dataclass(slots=True)
class RedisRefreshTokenStore(RefreshTokenStore):
    """
    Redis-backed refresh store holding one live digest per user.

    Two keys per user, both expiring with the refresh window:

    * ``rt:u:{user_id}`` -> digest of the live token
    * ``rt:h:{digest}`` -> user id (reverse lookup for logout)

    Writes run under WATCH/MULTI/EXEC on the user key and retry on
    :class:`redis.WatchError`, so replace and rotate are atomic per user.

    :param r: A Redis client (already connected).
    :param ttl_seconds: Key lifetime, equal to the refresh token lifetime.
    """

    r: redis.Redis
    ttl_seconds: int

    # -------------------- helpers --------------------

    @staticmethod
    def _ku(user_id: int) -> str:
        return f"rt:u:{user_id}"

    @staticmethod
    def _kh(digest: str) -> str:
        return f"rt:h:{digest}"

    def _watched(self, keys: list[str], body: Callable[[redis.client.Pipeline], T]) -> T:
        """Run ``body`` with ``keys`` watched, retrying on concurrent modification."""
        while True:
            try:
                with self.r.pipeline() as p:
                    p.watch(*keys)
                    return body(p)
            except redis.WatchError:
                continue

    # -------------------- API ------------------------

    def replace_for_user(self, user_id: int, token: str) -> None:
        digest = token_fingerprint(token)
        k_user = self._ku(user_id)

        def _replace(p: redis.client.Pipeline) -> None:
            previous = _text(p.get(k_user))
            p.multi()
            if previous and previous != digest:
                p.delete(self._kh(previous))
            p.set(k_user, digest, ex=self.ttl_seconds)
            p.set(self._kh(digest), str(user_id), ex=self.ttl_seconds)
            p.execute()

        self._watched([k_user], _replace)

    def find(self, token: str) -> RefreshRecord | None:
        digest = token_fingerprint(token)
        uid = _text(self.r.get(self._kh(digest)))
        if uid is None:
            return None
        # The reverse key may outlive a replacement for a moment; trust the user key.
        if _text(self.r.get(self._ku(int(uid)))) != digest:
            return None
        return RefreshRecord(user_id=int(uid), token_hash=digest)

    def get_for_user(self, user_id: int) -> RefreshRecord | None:
        digest = _text(self.r.get(self._ku(user_id)))
        return RefreshRecord(user_id=user_id, token_hash=digest) if digest else None

    def rotate(self, user_id: int, old_token: str, new_token: str) -> RotationResult:
        old_digest = token_fingerprint(old_token)
        new_digest = token_fingerprint(new_token)
        k_user = self._ku(user_id)

        def _rotate(p: redis.client.Pipeline) -> RotationResult:
            current = _text(p.get(k_user))
            if current is None:
                p.unwatch()
                return RotationResult.NOT_FOUND
            if current != old_digest:
                p.unwatch()
                return RotationResult.STALE
            p.multi()
            p.delete(self._kh(old_digest))
            p.set(k_user, new_digest, ex=self.ttl_seconds)
            p.set(self._kh(new_digest), str(user_id), ex=self.ttl_seconds)
            p.execute()
            return RotationResult.OK

        return self._watched([k_user], _rotate)

    def delete(self, token: str) -> bool:
        digest = token_fingerprint(token)
        k_hash = self._kh(digest)
        uid = _text(self.r.get(k_hash))
        if uid is None:
            return False
        k_user = self._ku(int(uid))

        def _delete(p: redis.client.Pipeline) -> bool:
            owns_user_key = _text(p.get(k_user)) == digest
            p.multi()
            p.delete(k_hash)
            if owns_user_key:
                p.delete(k_user)
            p.execute()
            return True

        return self._watched([k_user, k_hash], _delete)

    def delete_for_user(self, user_id: int) -> bool:
        k_user = self._ku(user_id)

        def _delete(p: redis.client.Pipeline) -> bool:
            digest = _text(p.get(k_user))
            if digest is None:
                p.unwatch()
                return False
            p.multi()
            p.delete(k_user)
            p.delete(self._kh(digest))
            p.execute()
            return True

        return self._watched([k_user], _delete)
