"""User model: credentials plus the public profile."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import JSON, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates
from werkzeug.security import check_password_hash, generate_password_hash

from aniverse.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin

if TYPE_CHECKING:
    from .tracked_item import TrackedItem

SOCIAL_LINK_KEYS = ("website", "telegram", "twitter", "vk", "discord")


class User(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Registered account holding credentials, profile and tracked items.

    Fields
    ------
    email : str
        Login email. Stored normalized (lowercase, trimmed).
    password_hash : str
        Salted hash (write-only setter via ``password``); never serialized.
    nickname, bio : str | None
        Free-form profile text.
    avatar_path, cover_path : str | None
        Paths returned by the upload storage; the API only records them.
    social_links : dict[str, str]
        Subset of :data:`SOCIAL_LINK_KEYS` mapped to URLs/handles.
    badge : str | None
        Short profile sticker.
    tracked_items : list[TrackedItem]
        Watch list in insertion order.
    """

    __tablename__ = "users"

    # Columns
    email: Mapped[str] = mapped_column(String(254), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(254), nullable=False)
    nickname: Mapped[str | None] = mapped_column(String(50))
    bio: Mapped[str | None] = mapped_column(Text)
    avatar_path: Mapped[str | None] = mapped_column(String(255))
    cover_path: Mapped[str | None] = mapped_column(String(255))
    social_links: Mapped[dict[str, str]] = mapped_column(JSON, nullable=False, default=dict)
    badge: Mapped[str | None] = mapped_column(String(32))

    # Constraints & indexes
    __table_args__ = (UniqueConstraint("email", name="uq_users_email"),)

    # Relationships
    tracked_items: Mapped[list[TrackedItem]] = relationship(
        "TrackedItem",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="TrackedItem.id",
    )

    # -------------------- Password API --------------------
    @property
    def password(self) -> Any:  # pragma: no cover - explicit write-only contract
        """
        Disallow reading passwords.

        :raises AttributeError: Always, to ensure password is write-only.
        """
        raise AttributeError("Password is write-only.")

    @password.setter
    def password(self, raw: str) -> None:
        """
        Hash and set the password.

        :param raw: Plain text password to hash.
        :type raw: str
        """
        if not isinstance(raw, str) or not raw:
            raise ValueError("Password must be a non-empty string.")
        self.password_hash = generate_password_hash(raw)

    def verify_password(self, raw: str) -> bool:
        """
        Verify a password against the stored hash.

        :param raw: Plain text password candidate.
        :type raw: str
        :returns: ``True`` if it matches; otherwise ``False``.
        :rtype: bool
        """
        if not self.password_hash:
            return False
        return bool(check_password_hash(self.password_hash, raw))

    # -------------------- Validators --------------------
    @validates("email")
    def _normalize_email(self, key: str, value: str) -> str:
        """
        Normalize and validate email.

        :raises ValueError: If email is missing or malformed.
        """
        if not value or not isinstance(value, str):
            raise ValueError("Email is required.")
        v = value.strip().lower()
        # Minimal sanity check; full validation happens at API layer.
        if "@" not in v or "." not in v.split("@")[-1]:
            raise ValueError("Email format looks invalid.")
        return v

    @validates("social_links")
    def _filter_social_links(self, key: str, value: dict[str, Any] | None) -> dict[str, str]:
        """Keep only known link keys with non-empty string values."""
        if not value:
            return {}
        return {
            k: str(v).strip()
            for k, v in value.items()
            if k in SOCIAL_LINK_KEYS and v is not None and str(v).strip()
        }
