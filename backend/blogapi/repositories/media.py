"""Media repository."""

from __future__ import annotations

from typing import cast

from sqlalchemy import update

from blogapi.models.base import utcnow
from blogapi.models.media import Media
from blogapi.repositories.base import BaseRepository


class MediaRepository(BaseRepository[Media]):
    """Persistence for :class:`Media` metadata (file bytes live in storage)."""

    model = Media

    def _sortable_fields(self):
        return {"created_at": Media.created_at, "size": Media.size, "filename": Media.filename}

    def _filterable_fields(self):
        return {
            "user_id": Media.user_id,
            "post_id": Media.post_id,
            "is_featured": Media.is_featured,
            "media_type": Media.media_type,
        }

    def _updatable_fields(self):
        return {"alt_text", "description", "post_id", "is_featured"}

    def for_post(self, post_id: str) -> list[Media]:
        return self.list(filters={"post_id": post_id}, sort=["created_at"])

    def featured_for_post(self, post_id: str) -> Media | None:
        stmt = (
            self._select()
            .where(Media.post_id == post_id, Media.is_featured.is_(True))
            .order_by(Media.created_at.desc())
        )
        return cast(Media | None, self.session.execute(stmt).scalars().first())

    def clear_featured(self, post_id: str, *, keep_id: str | None = None) -> int:
        """Unset ``is_featured`` on every other media item attached to ``post_id``."""
        stmt = update(Media).where(
            Media.post_id == post_id,
            Media.is_featured.is_(True),
            Media.deleted_at.is_(None),
        )
        if keep_id is not None:
            stmt = stmt.where(Media.id != keep_id)
        stmt = stmt.values(is_featured=False, updated_at=utcnow()).execution_options(
            synchronize_session="fetch"
        )
        return int(self.session.execute(stmt).rowcount or 0)
