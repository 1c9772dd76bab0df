"""Persisted refresh tokens backing rotation and revocation."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from blogapi.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin, as_utc, utcnow

if TYPE_CHECKING:
    from .user import User


class RefreshToken(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    A refresh token handed out at login, registration or rotation.

    The raw JWT string is stored so a presented token can be matched exactly.
    A token is *valid* only while it is not revoked and not past
    ``expires_at``.
    """

    __tablename__ = "refresh_tokens"

    token: Mapped[str] = mapped_column(String(1024), nullable=False)
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )
    is_revoked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (UniqueConstraint("token", name="uq_refresh_tokens_token"),)

    user: Mapped[User] = relationship("User", back_populates="refresh_tokens")

    def is_expired(self, now: datetime | None = None) -> bool:
        expires_at = as_utc(self.expires_at)
        if expires_at is None:
            raise ValueError("refresh token has no expiry")
        return (now or utcnow()) >= expires_at

    def is_valid(self, now: datetime | None = None) -> bool:
        return not self.is_revoked and not self.is_expired(now)
