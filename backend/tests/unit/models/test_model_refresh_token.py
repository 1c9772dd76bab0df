"""Tests for the RefreshToken model."""

from __future__ import annotations

from datetime import timedelta

import pytest

from blogapi.models.base import utcnow
from blogapi.models.refresh_token import RefreshToken


class TestRefreshToken:
    def test_valid_until_expiry(self):
        now = utcnow()
        row = RefreshToken(token="t", user_id="u", expires_at=now + timedelta(minutes=5))

        assert row.is_valid(now) is True
        assert row.is_expired(now + timedelta(minutes=5)) is True
        assert row.is_valid(now + timedelta(minutes=6)) is False

    def test_revoked_is_never_valid(self):
        row = RefreshToken(
            token="t", user_id="u", expires_at=utcnow() + timedelta(days=1), is_revoked=True
        )
        assert row.is_valid() is False

    def test_missing_expiry_raises(self):
        row = RefreshToken(token="t", user_id="u")
        with pytest.raises(ValueError, match="no expiry"):
            row.is_expired()
