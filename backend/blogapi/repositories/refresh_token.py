"""Refresh token persistence with atomic revocation."""

from __future__ import annotations

from datetime import datetime
from typing import cast

from sqlalchemy import delete, select, update

from blogapi.models.base import utcnow
from blogapi.models.refresh_token import RefreshToken
from blogapi.repositories.base import BaseRepository


class RefreshTokenRepository(BaseRepository[RefreshToken]):
    """Persistence for :class:`RefreshToken` rows.

    Revocation is a conditional ``UPDATE`` so two concurrent rotations of the
    same token cannot both observe success.
    """

    model = RefreshToken

    def _sortable_fields(self):
        return {"created_at": RefreshToken.created_at, "expires_at": RefreshToken.expires_at}

    def create(self, *, token: str, user_id: str, expires_at: datetime) -> RefreshToken:
        return self.add(RefreshToken(token=token, user_id=user_id, expires_at=expires_at))

    def find_by_token(self, token: str) -> RefreshToken | None:
        stmt = select(RefreshToken).where(RefreshToken.token == token)
        return cast(RefreshToken | None, self.session.execute(stmt).scalars().first())

    def find_by_user(self, user_id: str, *, only_valid: bool = False) -> list[RefreshToken]:
        stmt = select(RefreshToken).where(RefreshToken.user_id == user_id)
        if only_valid:
            stmt = stmt.where(
                RefreshToken.is_revoked.is_(False), RefreshToken.expires_at > utcnow()
            )
        stmt = stmt.order_by(RefreshToken.created_at.desc())
        return list(self.session.execute(stmt).scalars().all())

    def revoke(self, token: str) -> bool:
        """Revoke ``token`` only if it is currently unrevoked.

        :param token: Raw refresh token string.
        :type token: str
        :returns: ``True`` when exactly one row flipped from unrevoked to revoked.
        :rtype: bool
        """
        stmt = (
            update(RefreshToken)
            .where(RefreshToken.token == token, RefreshToken.is_revoked.is_(False))
            .values(is_revoked=True, updated_at=utcnow())
            .execution_options(synchronize_session="fetch")
        )
        result = self.session.execute(stmt)
        return result.rowcount == 1

    def revoke_all_by_user(self, user_id: str) -> int:
        """Revoke every unrevoked token of ``user_id``; returns the count."""
        stmt = (
            update(RefreshToken)
            .where(RefreshToken.user_id == user_id, RefreshToken.is_revoked.is_(False))
            .values(is_revoked=True, updated_at=utcnow())
            .execution_options(synchronize_session="fetch")
        )
        return int(self.session.execute(stmt).rowcount or 0)

    def delete_expired(self, now: datetime | None = None) -> int:
        """Hard-delete rows whose ``expires_at`` is in the past."""
        stmt = (
            delete(RefreshToken)
            .where(RefreshToken.expires_at < (now or utcnow()))
            .execution_options(synchronize_session="fetch")
        )
        return int(self.session.execute(stmt).rowcount or 0)
