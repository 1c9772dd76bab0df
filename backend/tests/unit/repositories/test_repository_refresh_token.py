"""Unit tests for RefreshTokenRepository."""

from __future__ import annotations

from datetime import timedelta

import pytest

from blogapi.models.base import utcnow
from blogapi.repositories.refresh_token import RefreshTokenRepository
from tests.factories.token import RefreshTokenFactory
from tests.factories.user import UserFactory


class TestRefreshTokenRepository:
    @pytest.fixture()
    def repo(self):
        return RefreshTokenRepository()

    def test_revoke_is_compare_and_set(self, repo, session):
        row = RefreshTokenFactory()

        assert repo.revoke(row.token) is True
        assert repo.revoke(row.token) is False
        session.refresh(row)
        assert row.is_revoked is True

    def test_revoke_unknown_token(self, repo):
        assert repo.revoke("never-issued") is False

    def test_find_by_token(self, repo):
        row = RefreshTokenFactory(token="rt-lookup")

        assert repo.find_by_token("rt-lookup").id == row.id
        assert repo.find_by_token("rt-missing") is None

    def test_revoke_all_by_user_counts_only_live_rows(self, repo):
        user = UserFactory()
        RefreshTokenFactory.create_batch(2, user=user)
        RefreshTokenFactory(user=user, is_revoked=True)
        other = RefreshTokenFactory()

        assert repo.revoke_all_by_user(str(user.id)) == 2
        assert repo.find_by_user(str(user.id), only_valid=True) == []
        assert repo.find_by_user(str(other.user_id), only_valid=True)[0].id == other.id

    def test_delete_expired(self, repo):
        expired_token = RefreshTokenFactory(expires_at=utcnow() - timedelta(hours=1)).token
        live_token = RefreshTokenFactory().token

        assert repo.delete_expired() == 1
        assert repo.find_by_token(expired_token) is None
        assert repo.find_by_token(live_token) is not None

    def test_delete_expired_keeps_session_usable(self, repo, session):
        expired = RefreshTokenFactory(expires_at=utcnow() - timedelta(hours=1))

        assert repo.delete_expired() == 1
        assert expired not in session
        assert repo.delete_expired() == 0
