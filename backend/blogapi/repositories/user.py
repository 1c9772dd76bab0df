"""User repository: the identity store."""

from __future__ import annotations

from typing import cast

from sqlalchemy import func, or_, select

from blogapi.models.post import Post
from blogapi.models.user import Role, User
from blogapi.repositories.base import BaseRepository, Page, Pagination


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    Lookups ignore soft-deleted accounts, so a deleted user can neither log in
    nor be resolved from a still-valid access token.
    """

    model = User

    # ---------------------------- Whitelists ----------------------------

    def _sortable_fields(self):
        return {
            "created_at": User.created_at,
            "updated_at": User.updated_at,
            "username": User.username,
            "email": User.email,
        }

    def _filterable_fields(self):
        return {
            "email": User.email,
            "username": User.username,
            "role": User.role,
            "is_active": User.is_active,
        }

    def _updatable_fields(self):
        """Profile and management fields (never ``password_hash``)."""
        return {"username", "email", "full_name", "avatar", "role", "is_active"}

    # ---------------------------- Lookup helpers ----------------------------

    def get_by_email(self, email: str) -> User | None:
        """Fetch a user by email (case-insensitive).

        :param email: Email address to normalise and search.
        :type email: str
        :returns: User instance or ``None`` when not found.
        :rtype: User | None
        """
        stmt = self._select().where(User.email == email.lower().strip())
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def get_by_username(self, username: str) -> User | None:
        stmt = self._select().where(User.username == username.strip())
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def exists_by_email(self, email: str, *, exclude_id: str | None = None) -> bool:
        """Return ``True`` when any account (deleted included) holds ``email``.

        The unique constraint spans soft-deleted rows too.
        """
        stmt = select(User.id).where(User.email == email.lower().strip())
        if exclude_id is not None:
            stmt = stmt.where(User.id != exclude_id)
        return self.session.execute(stmt).first() is not None

    def exists_by_username(self, username: str, *, exclude_id: str | None = None) -> bool:
        stmt = select(User.id).where(User.username == username.strip())
        if exclude_id is not None:
            stmt = stmt.where(User.id != exclude_id)
        return self.session.execute(stmt).first() is not None

    # ---------------------------- Listing ----------------------------

    def search(
        self,
        pagination: Pagination,
        *,
        search: str | None = None,
        role: Role | None = None,
        is_active: bool | None = None,
    ) -> Page[User]:
        """Paginate users with free-text search over username/email/full name."""
        where = []
        if search:
            pattern = f"%{search.strip().lower()}%"
            where.append(
                or_(
                    func.lower(User.username).like(pattern),
                    func.lower(User.email).like(pattern),
                    func.lower(User.full_name).like(pattern),
                )
            )
        return self.paginate(
            pagination,
            filters={"role": role, "is_active": is_active},
            where=where,
        )

    def count_posts(self, user_id: str) -> int:
        stmt = (
            select(func.count(Post.id))
            .where(Post.author_id == user_id)
            .where(Post.deleted_at.is_(None))
        )
        return int(self.session.execute(stmt).scalar_one())

    def post_counts(self, user_ids: list[str]) -> dict[str, int]:
        """Live post counts keyed by author id (missing ids count 0)."""
        counts = {uid: 0 for uid in user_ids}
        if not user_ids:
            return counts
        stmt = (
            select(Post.author_id, func.count(Post.id))
            .where(Post.author_id.in_(user_ids), Post.deleted_at.is_(None))
            .group_by(Post.author_id)
        )
        for author_id, total in self.session.execute(stmt).all():
            counts[author_id] = int(total)
        return counts
