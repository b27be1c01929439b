"""Persisted refresh-token record (one live row per user)."""

from __future__ import annotations

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from aniverse.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin


class RefreshToken(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """Fingerprint of the single refresh token a user may currently redeem.

    Only the SHA-256 digest of the signed token is stored. There is no expiry
    column: expiry is carried and verified inside the token itself.
    """

    __tablename__ = "refresh_tokens"

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    token_hash: Mapped[str] = mapped_column(String(64), nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", name="uq_refresh_tokens_user_id"),
        UniqueConstraint("token_hash", name="uq_refresh_tokens_token_hash"),
    )
