"""Uploaded media files and their metadata."""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from blogapi.core.extensions import db

from .base import PKMixin, ReprMixin, SoftDeleteMixin, TimestampMixin

if TYPE_CHECKING:
    from .post import Post
    from .user import User


class MediaType(str, enum.Enum):
    IMAGE = "image"


class Media(PKMixin, ReprMixin, TimestampMixin, SoftDeleteMixin, db.Model):
    """
    Stored file uploaded by a user, optionally attached to a post.

    Fields
    ------
    path : str
        Storage-relative path (e.g. ``media/<uuid>.jpg``).
    url : str
        Public URL derived from ``STORAGE_BASE_URL`` and ``path``.
    width, height : int | None
        Pixel dimensions after processing.
    """

    __tablename__ = "media"

    filename: Mapped[str] = mapped_column(String(255), nullable=False)
    original_name: Mapped[str] = mapped_column(String(255), nullable=False)
    mime_type: Mapped[str] = mapped_column(String(100), nullable=False)
    path: Mapped[str] = mapped_column(String(500), nullable=False, index=True)
    url: Mapped[str] = mapped_column(String(500), nullable=False)
    size: Mapped[int] = mapped_column(Integer, nullable=False)
    width: Mapped[int | None] = mapped_column(Integer)
    height: Mapped[int | None] = mapped_column(Integer)
    alt_text: Mapped[str | None] = mapped_column(String(500))
    description: Mapped[str | None] = mapped_column(Text)
    media_type: Mapped[MediaType] = mapped_column(
        Enum(
            MediaType,
            name="media_type",
            native_enum=False,
            length=50,
            values_callable=lambda kinds: [k.value for k in kinds],
        ),
        nullable=False,
        default=MediaType.IMAGE,
    )
    post_id: Mapped[str | None] = mapped_column(
        ForeignKey("posts.id", ondelete="SET NULL"), nullable=True, index=True
    )
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    is_featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Relationships
    post: Mapped[Post | None] = relationship("Post")
    user: Mapped[User] = relationship("User")
