"""
Unit tests for access-token denylist stores.

The Redis store runs against fakeredis so the suite needs no server.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import fakeredis
import pytest
from freezegun import freeze_time

from blogapi.infra.redis.redis_denylist_store import RedisTokenDenylistStore
from blogapi.services._shared.ports import InMemoryDenylistStore


def _in(minutes: int) -> datetime:
    return datetime.now(UTC) + timedelta(minutes=minutes)


@pytest.fixture
def fake_redis():
    r = fakeredis.FakeRedis()
    r.flushall()
    return r


@pytest.fixture
def redis_store(fake_redis):
    return RedisTokenDenylistStore(fake_redis)


class TestRedisTokenDenylistStore:
    def test_unknown_jti_is_not_revoked(self, redis_store):
        assert redis_store.is_revoked("jti-1") is False

    def test_revoke_marks_jti(self, redis_store, fake_redis):
        redis_store.revoke_jti(jti="jti-1", expires_at=_in(10))

        assert redis_store.is_revoked("jti-1") is True
        assert redis_store.is_revoked("jti-2") is False
        assert fake_redis.exists("deny:at:jti-1") == 1

    def test_entry_ttl_follows_token_expiry(self, redis_store, fake_redis):
        redis_store.revoke_jti(jti="jti-1", expires_at=_in(10))

        ttl = fake_redis.ttl("deny:at:jti-1")
        assert 0 < ttl <= 600

    def test_already_expired_token_gets_minimal_ttl(self, redis_store, fake_redis):
        redis_store.revoke_jti(jti="jti-1", expires_at=_in(-5))

        assert fake_redis.ttl("deny:at:jti-1") == 1

    def test_revoke_is_idempotent(self, redis_store):
        redis_store.revoke_jti(jti="jti-1", expires_at=_in(10))
        redis_store.revoke_jti(jti="jti-1", expires_at=_in(10))

        assert redis_store.is_revoked("jti-1") is True

    def test_custom_prefix(self, fake_redis):
        store = RedisTokenDenylistStore(fake_redis, prefix="blog:deny:")
        store.revoke_jti(jti="jti-1", expires_at=_in(10))

        assert fake_redis.exists("blog:deny:jti-1") == 1


class TestInMemoryDenylistStore:
    def test_revoke_and_lookup(self):
        store = InMemoryDenylistStore()
        store.revoke_jti(jti="jti-1", expires_at=_in(10))

        assert store.is_revoked("jti-1")
        assert not store.is_revoked("jti-2")

    def test_entries_lapse_with_the_token(self):
        store = InMemoryDenylistStore()
        with freeze_time("2026-03-01 12:00:00"):
            store.revoke_jti(jti="jti-1", expires_at=datetime(2026, 3, 1, 12, 5, tzinfo=UTC))
            assert store.is_revoked("jti-1")
        with freeze_time("2026-03-01 12:06:00"):
            assert not store.is_revoked("jti-1")
