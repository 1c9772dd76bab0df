"""Category repository."""

from __future__ import annotations

from typing import cast

from sqlalchemy import func, or_, select

from blogapi.models.category import Category
from blogapi.models.post import Post
from blogapi.repositories.base import BaseRepository, Page, Pagination


class CategoryRepository(BaseRepository[Category]):
    """Persistence for :class:`Category` plus post counting helpers."""

    model = Category

    def _sortable_fields(self):
        return {
            "name": Category.name,
            "slug": Category.slug,
            "created_at": Category.created_at,
        }

    def _filterable_fields(self):
        return {"slug": Category.slug}

    def _updatable_fields(self):
        return {"name", "slug", "description"}

    def get_by_slug(self, slug: str) -> Category | None:
        stmt = self._select().where(Category.slug == slug.strip().lower())
        return cast(Category | None, self.session.execute(stmt).scalars().first())

    def slug_taken(self, slug: str, *, exclude_id: str | None = None) -> bool:
        """Return ``True`` if any row (deleted included) owns ``slug``."""
        stmt = select(Category.id).where(Category.slug == slug.strip().lower())
        if exclude_id is not None:
            stmt = stmt.where(Category.id != exclude_id)
        return self.session.execute(stmt).first() is not None

    def search(self, pagination: Pagination, *, search: str | None = None) -> Page[Category]:
        where = []
        if search:
            pattern = f"%{search.strip().lower()}%"
            where.append(
                or_(
                    func.lower(Category.name).like(pattern),
                    func.lower(Category.description).like(pattern),
                )
            )
        return self.paginate(pagination, where=where)

    def count_posts(self, category_id: str) -> int:
        stmt = (
            select(func.count(Post.id))
            .where(Post.category_id == category_id)
            .where(Post.deleted_at.is_(None))
        )
        return int(self.session.execute(stmt).scalar_one())

    def post_counts(self, category_ids: list[str]) -> dict[str, int]:
        """Return live post counts keyed by category id (zero when absent)."""
        if not category_ids:
            return {}
        stmt = (
            select(Post.category_id, func.count(Post.id))
            .where(Post.category_id.in_(category_ids))
            .where(Post.deleted_at.is_(None))
            .group_by(Post.category_id)
        )
        counts = {cid: 0 for cid in category_ids}
        for cid, n in self.session.execute(stmt).all():
            counts[cid] = int(n)
        return counts
