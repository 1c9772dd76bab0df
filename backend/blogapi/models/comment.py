"""Comments and threaded replies on posts."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from blogapi.core.extensions import db

from .base import PKMixin, ReprMixin, SoftDeleteMixin, TimestampMixin

if TYPE_CHECKING:
    from .post import Post
    from .user import User


class Comment(PKMixin, ReprMixin, TimestampMixin, SoftDeleteMixin, db.Model):
    """
    Comment left by a user on a post.

    A reply points at its ``parent`` which must belong to the same post.
    """

    __tablename__ = "comments"

    content: Mapped[str] = mapped_column(Text, nullable=False)
    post_id: Mapped[str] = mapped_column(
        ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    parent_id: Mapped[str | None] = mapped_column(
        ForeignKey("comments.id", ondelete="CASCADE"), nullable=True, index=True
    )

    # Relationships
    post: Mapped[Post] = relationship("Post", back_populates="comments")
    user: Mapped[User] = relationship("User", lazy="joined", innerjoin=True)
    parent: Mapped[Comment | None] = relationship(
        "Comment", remote_side="Comment.id", back_populates="replies"
    )
    replies: Mapped[list[Comment]] = relationship(
        "Comment", back_populates="parent", lazy="select", order_by="Comment.created_at"
    )

    @property
    def is_reply(self) -> bool:
        return self.parent_id is not None
