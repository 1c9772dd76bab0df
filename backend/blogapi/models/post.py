"""Blog post model and its publication lifecycle."""

from __future__ import annotations

import enum
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    JSON,
    CheckConstraint,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from blogapi.core.extensions import db

from .base import PKMixin, ReprMixin, SoftDeleteMixin, TimestampMixin, utcnow

if TYPE_CHECKING:
    from .category import Category
    from .comment import Comment
    from .user import User


class PostStatus(str, enum.Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class Post(PKMixin, ReprMixin, TimestampMixin, SoftDeleteMixin, db.Model):
    """
    Article written by a user inside a category.

    Notes
    -----
    - ``content`` is stored already sanitized.
    - ``published_at`` is stamped on the first transition into ``published``
      and kept afterwards, even when the post is unpublished.
    """

    __tablename__ = "posts"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    slug: Mapped[str] = mapped_column(String(200), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    excerpt: Mapped[str | None] = mapped_column(String(500))
    featured_image: Mapped[str | None] = mapped_column(String(500))
    tags: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    status: Mapped[PostStatus] = mapped_column(
        Enum(
            PostStatus,
            name="post_status",
            native_enum=False,
            length=20,
            values_callable=lambda statuses: [s.value for s in statuses],
        ),
        nullable=False,
        default=PostStatus.DRAFT,
    )
    view_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    author_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    category_id: Mapped[str] = mapped_column(
        ForeignKey("categories.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    published_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    __table_args__ = (
        UniqueConstraint("slug", name="uq_posts_slug"),
        CheckConstraint("view_count >= 0", name="view_count_non_negative"),
        Index("ix_posts_status_published_at", "status", "published_at"),
    )

    # Relationships
    author: Mapped[User] = relationship(
        "User", back_populates="posts", lazy="joined", innerjoin=True
    )
    category: Mapped[Category] = relationship(
        "Category", back_populates="posts", lazy="joined", innerjoin=True
    )
    comments: Mapped[list[Comment]] = relationship(
        "Comment", back_populates="post", lazy="select", passive_deletes=True
    )

    # -------------------- Lifecycle --------------------
    @property
    def is_published(self) -> bool:
        return self.status is PostStatus.PUBLISHED

    def change_status(self, status: PostStatus, *, now: datetime | None = None) -> None:
        """Set ``status``, stamping ``published_at`` on the first publication."""
        entering_published = status is PostStatus.PUBLISHED and not self.is_published
        self.status = status
        if entering_published and self.published_at is None:
            self.published_at = now or utcnow()

    def publish(self, *, now: datetime | None = None) -> None:
        if self.is_published:
            raise ValueError("post is already published")
        self.change_status(PostStatus.PUBLISHED, now=now)

    def unpublish(self) -> None:
        if not self.is_published:
            raise ValueError("post is not published")
        self.status = PostStatus.DRAFT

    # -------------------- Validators --------------------
    @validates("slug")
    def _normalize_slug(self, key: str, value: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Slug is required.")
        return value.strip().lower()

    @validates("tags")
    def _normalize_tags(self, key: str, value: list[str] | None) -> list[str]:
        seen: list[str] = []
        for tag in value or []:
            t = str(tag).strip()
            if t and t not in seen:
                seen.append(t)
        return seen

    @validates("status")
    def _coerce_status(self, key: str, value: PostStatus | str) -> PostStatus:
        return value if isinstance(value, PostStatus) else PostStatus(value)
