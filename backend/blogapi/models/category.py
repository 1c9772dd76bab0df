"""Post categories managed by administrators."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from blogapi.core.extensions import db

from .base import PKMixin, ReprMixin, SoftDeleteMixin, TimestampMixin

if TYPE_CHECKING:
    from .post import Post


class Category(PKMixin, ReprMixin, TimestampMixin, SoftDeleteMixin, db.Model):
    """Named bucket for posts; it has no owner."""

    __tablename__ = "categories"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)

    __table_args__ = (UniqueConstraint("slug", name="uq_categories_slug"),)

    posts: Mapped[list[Post]] = relationship("Post", back_populates="category", lazy="select")

    @validates("slug")
    def _normalize_slug(self, key: str, value: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Slug is required.")
        return value.strip().lower()
