"""Refresh-token record repository (one row per user, keyed by digest)."""

from __future__ import annotations

from typing import cast

from sqlalchemy import delete, func, select, update

from aniverse.models.refresh_token import RefreshToken
from aniverse.repositories.base import BaseRepository


class RefreshTokenRepository(BaseRepository[RefreshToken]):
    """Persistence-only access to :class:`RefreshToken` rows.

    All methods take token *digests*, never raw tokens.
    """

    model = RefreshToken

    def get_by_hash(self, token_hash: str) -> RefreshToken | None:
        stmt = select(RefreshToken).where(RefreshToken.token_hash == token_hash)
        return cast(RefreshToken | None, self.session.execute(stmt).scalars().first())

    def get_for_user(self, user_id: int) -> RefreshToken | None:
        stmt = select(RefreshToken).where(RefreshToken.user_id == user_id)
        return cast(RefreshToken | None, self.session.execute(stmt).scalars().first())

    def replace_for_user(self, user_id: int, token_hash: str) -> None:
        """Make ``token_hash`` the only live record of ``user_id``.

        Uses ``INSERT ... ON CONFLICT (user_id) DO UPDATE`` where available so
        two concurrent logins cannot leave two rows behind.
        """
        insert = self._upsert_insert()
        if insert is not None:
            stmt = insert.values(user_id=user_id, token_hash=token_hash).on_conflict_do_update(
                index_elements=[RefreshToken.user_id],
                set_={"token_hash": token_hash, "updated_at": func.now()},
            )
            self.session.execute(stmt)
            return

        current = self.session.execute(
            select(RefreshToken).where(RefreshToken.user_id == user_id).with_for_update()
        ).scalars().first()
        if current is None:
            self.add(RefreshToken(user_id=user_id, token_hash=token_hash))
        else:
            current.token_hash = token_hash
            self.flush()

    def compare_and_swap(self, user_id: int, old_hash: str, new_hash: str) -> bool:
        """Swap the user's digest only if it still equals ``old_hash``.

        :returns: ``True`` when exactly one row was updated.
        """
        stmt = (
            update(RefreshToken)
            .where(RefreshToken.user_id == user_id, RefreshToken.token_hash == old_hash)
            .values(token_hash=new_hash, updated_at=func.now())
        )
        return (self.session.execute(stmt).rowcount or 0) == 1

    def delete_by_hash(self, token_hash: str) -> bool:
        stmt = delete(RefreshToken).where(RefreshToken.token_hash == token_hash)
        return (self.session.execute(stmt).rowcount or 0) > 0

    def delete_for_user(self, user_id: int) -> bool:
        stmt = delete(RefreshToken).where(RefreshToken.user_id == user_id)
        return (self.session.execute(stmt).rowcount or 0) > 0
