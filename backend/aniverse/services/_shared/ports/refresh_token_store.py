from __future__ import annotations

import hashlib
import threading
from dataclasses import dataclass
from enum import Enum, auto
from typing import Protocol


def token_fingerprint(token: str) -> str:
    """Return the SHA-256 hex digest stored in place of a raw refresh token."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


class RotationResult(Enum):
    """Outcome of an atomic refresh rotation attempt."""

    OK = auto()
    #: The user has a live record, but for a different token (rotated or re-logged in).
    STALE = auto()
    #: The user has no live record (logged out or revoked).
    NOT_FOUND = auto()


@dataclass(frozen=True, slots=True)
class RefreshRecord:
    """
    Read-model of the single live refresh record of a user.

    :ivar user_id: Owner user id.
    :ivar token_hash: SHA-256 digest of the live refresh token.
    """

    user_id: int
    token_hash: str


class RefreshTokenStore(Protocol):
    """
    Stateful store holding at most one live refresh token per user.

    Implementations MUST make :meth:`replace_for_user` and :meth:`rotate`
    atomic with respect to concurrent callers for the same user.
    """

    def replace_for_user(self, user_id: int, token: str) -> None:
        """Make ``token`` the user's only live refresh token, revoking any previous one."""

    def find(self, token: str) -> RefreshRecord | None:
        """Return the record when ``token`` is the live token of some user."""

    def get_for_user(self, user_id: int) -> RefreshRecord | None:
        """Return the user's live record, if any."""

    def rotate(self, user_id: int, old_token: str, new_token: str) -> RotationResult:
        """Atomically swap ``old_token`` for ``new_token`` if it is still the live one."""

    def delete(self, token: str) -> bool:
        """Remove the record of ``token``. Idempotent. :returns: True if it existed."""

    def delete_for_user(self, user_id: int) -> bool:
        """Remove the user's record, whatever token it holds. Idempotent."""


class InMemoryRefreshTokenStore(RefreshTokenStore):
    """
    In-memory refresh store for unit tests and single-process tooling.

    .. note::
       Uses a threading lock to provide the atomicity the port requires.
    """

    def __init__(self) -> None:
        self._by_user: dict[int, str] = {}
        self._by_hash: dict[str, int] = {}
        self._lock = threading.Lock()

    def replace_for_user(self, user_id: int, token: str) -> None:
        digest = token_fingerprint(token)
        with self._lock:
            previous = self._by_user.get(user_id)
            if previous is not None:
                self._by_hash.pop(previous, None)
            self._by_user[user_id] = digest
            self._by_hash[digest] = user_id

    def find(self, token: str) -> RefreshRecord | None:
        digest = token_fingerprint(token)
        with self._lock:
            user_id = self._by_hash.get(digest)
        if user_id is None:
            return None
        return RefreshRecord(user_id=user_id, token_hash=digest)

    def get_for_user(self, user_id: int) -> RefreshRecord | None:
        with self._lock:
            digest = self._by_user.get(user_id)
        return RefreshRecord(user_id=user_id, token_hash=digest) if digest else None

    def rotate(self, user_id: int, old_token: str, new_token: str) -> RotationResult:
        old_digest = token_fingerprint(old_token)
        new_digest = token_fingerprint(new_token)
        with self._lock:
            current = self._by_user.get(user_id)
            if current is None:
                return RotationResult.NOT_FOUND
            if current != old_digest:
                return RotationResult.STALE
            self._by_hash.pop(old_digest, None)
            self._by_user[user_id] = new_digest
            self._by_hash[new_digest] = user_id
            return RotationResult.OK

    def delete(self, token: str) -> bool:
        digest = token_fingerprint(token)
        with self._lock:
            user_id = self._by_hash.pop(digest, None)
            if user_id is None:
                return False
            if self._by_user.get(user_id) == digest:
                del self._by_user[user_id]
            return True

    def delete_for_user(self, user_id: int) -> bool:
        with self._lock:
            digest = self._by_user.pop(user_id, None)
            if digest is None:
                return False
            self._by_hash.pop(digest, None)
            return True
