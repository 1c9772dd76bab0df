from __future__ import annotations

import threading
from datetime import UTC, datetime
from typing import Protocol


class TokenDenylistStore(Protocol):
    """
    Abstraction for a denylist store for **access tokens**.

    Entries only need to live until the token would have expired anyway.
    Methods are expected to be idempotent.
    """

    def is_revoked(self, jti: str) -> bool: ...
    def revoke_jti(self, *, jti: str, expires_at: datetime) -> None: ...


class InMemoryDenylistStore(TokenDenylistStore):
    """Process-local denylist keyed by JTI, used when no Redis is configured."""

    def __init__(self) -> None:
        self._revoked: dict[str, datetime] = {}
        self._lock = threading.Lock()

    def is_revoked(self, jti: str) -> bool:
        now = datetime.now(UTC)
        with self._lock:
            expires_at = self._revoked.get(jti)
            if expires_at is None:
                return False
            if expires_at <= now:
                del self._revoked[jti]
                return False
            return True

    def revoke_jti(self, *, jti: str, expires_at: datetime) -> None:
        with self._lock:
            self._purge(datetime.now(UTC))
            self._revoked[jti] = expires_at

    def _purge(self, now: datetime) -> None:
        for key in [k for k, exp in self._revoked.items() if exp <= now]:
            del self._revoked[key]
