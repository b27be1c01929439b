"""Refresh store backed by the ``refresh_tokens`` table."""

from __future__ import annotations

from collections.abc import Callable

from aniverse.services._shared.ports.refresh_token_store import (
    RefreshRecord,
    RefreshTokenStore,
    RotationResult,
    token_fingerprint,
)
from aniverse.uow.sqlalchemy_uow import SQLAlchemyReadOnlyUnitOfWork, SQLAlchemyUnitOfWork


class SqlRefreshTokenStore(RefreshTokenStore):
    """
    SQL refresh store; each call runs in its own unit of work.

    Atomicity comes from the database: ``replace_for_user`` is an
    ``INSERT ... ON CONFLICT (user_id) DO UPDATE`` and ``rotate`` a
    conditional ``UPDATE ... WHERE token_hash = :old``, so two concurrent
    refreshes with the same token cannot both succeed.
    """

    def __init__(
        self,
        *,
        uow_factory: Callable[[], SQLAlchemyUnitOfWork] = SQLAlchemyUnitOfWork,
        ro_uow_factory: Callable[[], SQLAlchemyReadOnlyUnitOfWork] = SQLAlchemyReadOnlyUnitOfWork,
    ) -> None:
        self._uow = uow_factory
        self._ro_uow = ro_uow_factory

    def replace_for_user(self, user_id: int, token: str) -> None:
        with self._uow() as uow:
            uow.refresh_tokens.replace_for_user(user_id, token_fingerprint(token))

    def find(self, token: str) -> RefreshRecord | None:
        with self._ro_uow() as uow:
            row = uow.refresh_tokens.get_by_hash(token_fingerprint(token))
            if row is None:
                return None
            return RefreshRecord(user_id=row.user_id, token_hash=row.token_hash)

    def get_for_user(self, user_id: int) -> RefreshRecord | None:
        with self._ro_uow() as uow:
            row = uow.refresh_tokens.get_for_user(user_id)
            if row is None:
                return None
            return RefreshRecord(user_id=row.user_id, token_hash=row.token_hash)

    def rotate(self, user_id: int, old_token: str, new_token: str) -> RotationResult:
        with self._uow() as uow:
            repo = uow.refresh_tokens
            if repo.compare_and_swap(user_id, token_fingerprint(old_token), token_fingerprint(new_token)):
                return RotationResult.OK
            return RotationResult.NOT_FOUND if repo.get_for_user(user_id) is None else RotationResult.STALE

    def delete(self, token: str) -> bool:
        with self._uow() as uow:
            return uow.refresh_tokens.delete_by_hash(token_fingerprint(token))

    def delete_for_user(self, user_id: int) -> bool:
        with self._uow() as uow:
            return uow.refresh_tokens.delete_for_user(user_id)
