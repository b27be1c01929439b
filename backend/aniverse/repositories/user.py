"""User repository for persistence and authentication utilities."""

from __future__ import annotations

from typing import cast

from sqlalchemy import select

from aniverse.models.user import User
from aniverse.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    This repository focuses on safe lookup and password verification.
    It NEVER handles tokens or sessions; only DB-level user management.
    """

    model = User

    # ---------------------------- Whitelists ----------------------------

    def _filterable_fields(self):
        """Whitelist fields safe for equality filters."""
        return {"email": User.email, "nickname": User.nickname}

    def _updatable_fields(self):
        """Profile fields the owner may change (never email or password)."""
        return {"nickname", "bio", "avatar_path", "cover_path", "social_links", "badge"}

    # ---------------------------- Lookup helpers ----------------------------

    def get_by_email(self, email: str) -> User | None:
        """Fetch a user by email (case-insensitive).

        :param email: Email address to normalise and search.
        :type email: str
        :returns: User instance or ``None`` when not found.
        :rtype: User | None
        """
        stmt = select(User).where(User.email == email.lower().strip())
        result = self.session.execute(stmt).scalars().first()
        return cast(User | None, result)

    def exists_by_email(self, email: str) -> bool:
        """Return ``True`` when a user with the provided email exists."""
        stmt = select(User.id).where(User.email == email.lower().strip())
        return bool(self.session.execute(stmt).first())

    def exists_by_id(self, user_id: int) -> bool:
        """Return ``True`` when ``user_id`` resolves to a user row."""
        stmt = select(User.id).where(User.id == user_id)
        return bool(self.session.execute(stmt).first())

    def authenticate(self, email: str, password: str) -> User | None:
        """Authenticate a user by email and password.

        Unknown email and wrong password are indistinguishable to the caller.

        :returns: Authenticated user or ``None`` when credentials fail.
        :rtype: User | None
        """
        user = self.get_by_email(email)
        if not user or not user.verify_password(password):
            return None
        return user

    def get_many(self, user_ids: list[int]) -> list[User]:
        """Return the users matching ``user_ids`` ordered by id."""
        if not user_ids:
            return []
        stmt = select(User).where(User.id.in_(user_ids)).order_by(User.id.asc())
        return list(self.session.execute(stmt).scalars().all())
