"""Comment repository."""

from __future__ import annotations

from sqlalchemy import func, select

from blogapi.models.comment import Comment
from blogapi.repositories.base import BaseRepository, Page, Pagination


class CommentRepository(BaseRepository[Comment]):
    """Persistence for :class:`Comment` threads."""

    model = Comment

    def _sortable_fields(self):
        return {"created_at": Comment.created_at, "updated_at": Comment.updated_at}

    def _filterable_fields(self):
        return {
            "post_id": Comment.post_id,
            "user_id": Comment.user_id,
            "parent_id": Comment.parent_id,
        }

    def _updatable_fields(self):
        return {"content"}

    def top_level_for_post(self, post_id: str, pagination: Pagination) -> Page[Comment]:
        """Paginate root comments of a post; replies are fetched separately."""
        return self.paginate(
            pagination,
            filters={"post_id": post_id},
            where=[Comment.parent_id.is_(None)],
        )

    def replies_for(self, parent_ids: list[str]) -> dict[str, list[Comment]]:
        """Return live replies grouped by parent id, oldest first."""
        grouped: dict[str, list[Comment]] = {pid: [] for pid in parent_ids}
        if not parent_ids:
            return grouped
        stmt = (
            self._select()
            .where(Comment.parent_id.in_(parent_ids))
            .order_by(Comment.created_at.asc(), Comment.id.asc())
        )
        for reply in self.session.execute(stmt).unique().scalars().all():
            grouped.setdefault(reply.parent_id, []).append(reply)
        return grouped

    def count_for_post(self, post_id: str) -> int:
        stmt = self._live(select(func.count(Comment.id))).where(Comment.post_id == post_id)
        return int(self.session.execute(stmt).scalar_one())

    def counts_for_posts(self, post_ids: list[str]) -> dict[str, int]:
        """Live comment counts keyed by post id (missing ids count 0)."""
        counts = {pid: 0 for pid in post_ids}
        if not post_ids:
            return counts
        stmt = self._live(
            select(Comment.post_id, func.count(Comment.id))
            .where(Comment.post_id.in_(post_ids))
            .group_by(Comment.post_id)
        )
        for post_id, total in self.session.execute(stmt).all():
            counts[post_id] = int(total)
        return counts
