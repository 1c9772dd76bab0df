from __future__ import annotations

from datetime import UTC, datetime
from typing import cast

import redis  # type: ignore[import-untyped]


class RedisTokenDenylistStore:
    """
    Denylist for **access tokens** by jti, shared by every worker.

    Each entry expires together with the token it blocks.
    """

    def __init__(self, r: redis.Redis, *, prefix: str = "deny:at:"):
        self.r = r
        self.prefix = prefix

    def _k(self, jti: str) -> str:
        return f"{self.prefix}{jti}"

    def is_revoked(self, jti: str) -> bool:
        return cast(int, self.r.exists(self._k(jti))) == 1

    def revoke_jti(self, *, jti: str, expires_at: datetime) -> None:
        now = datetime.now(UTC).timestamp()
        ttl = max(1, int(expires_at.timestamp() - now))
        # idempotent marker with TTL
        self.r.set(self._k(jti), "1", ex=ttl)
