"""Post repository with visibility-aware listing."""

from __future__ import annotations

from typing import Any, cast

from sqlalchemy import ColumnElement, Text, func, or_, select, update
from sqlalchemy import cast as sql_cast

from blogapi.models.post import Post, PostStatus
from blogapi.repositories.base import BaseRepository, Page, Pagination


class PostRepository(BaseRepository[Post]):
    """Persistence for :class:`Post`.

    Visibility rules are decided by the service; this repository only turns
    them into SQL through :meth:`search`.
    """

    model = Post

    def _sortable_fields(self):
        return {
            "created_at": Post.created_at,
            "updated_at": Post.updated_at,
            "published_at": Post.published_at,
            "title": Post.title,
            "views": Post.view_count,
        }

    def _filterable_fields(self):
        return {
            "status": Post.status,
            "category_id": Post.category_id,
            "author_id": Post.author_id,
        }

    def _updatable_fields(self):
        return {"title", "slug", "content", "excerpt", "featured_image", "tags", "category_id"}

    def get_by_slug(self, slug: str) -> Post | None:
        stmt = self._select().where(Post.slug == slug.strip().lower())
        return cast(Post | None, self.session.execute(stmt).unique().scalars().first())

    def slug_taken(self, slug: str, *, exclude_id: str | None = None) -> bool:
        stmt = select(Post.id).where(Post.slug == slug.strip().lower())
        if exclude_id is not None:
            stmt = stmt.where(Post.id != exclude_id)
        return self.session.execute(stmt).first() is not None

    def search(
        self,
        pagination: Pagination,
        *,
        search: str | None = None,
        tag: str | None = None,
        filters: dict[str, Any] | None = None,
        visible_to: str | None = None,
        published_only: bool = False,
    ) -> Page[Post]:
        """Paginate posts.

        :param search: Case-insensitive match on title, excerpt or content.
        :param tag: Exact tag membership.
        :param filters: Equality filters (status, category_id, author_id).
        :param visible_to: When set, restrict to published posts plus the
            posts authored by this user id.
        :param published_only: Restrict to published posts.
        """
        where: list[ColumnElement[bool]] = []
        if published_only:
            where.append(Post.status == PostStatus.PUBLISHED)
        elif visible_to is not None:
            where.append(or_(Post.status == PostStatus.PUBLISHED, Post.author_id == visible_to))
        if search:
            pattern = f"%{search.strip().lower()}%"
            where.append(
                or_(
                    func.lower(Post.title).like(pattern),
                    func.lower(Post.excerpt).like(pattern),
                    func.lower(Post.content).like(pattern),
                )
            )
        if tag:
            # JSON arrays are stored as text on every backend we target
            where.append(func.lower(sql_cast(Post.tags, Text)).like(f'%"{tag.lower()}"%'))
        return self.paginate(pagination, filters=filters, where=where)

    def increment_views(self, post_id: str) -> bool:
        """Atomically bump ``view_count``; returns ``False`` for unknown posts."""
        stmt = (
            update(Post)
            .where(Post.id == post_id, Post.deleted_at.is_(None))
            .values(view_count=Post.view_count + 1)
            .execution_options(synchronize_session=False)
        )
        return self.session.execute(stmt).rowcount == 1
