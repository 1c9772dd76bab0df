from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Protocol


class TokenProvider(Protocol):
    """
    Port for issuing and verifying signed tokens.

    ``decode`` verifies signature, algorithm and expiry. It raises
    :class:`~blogapi.services._shared.errors.TokenExpiredError` for expired
    tokens and :class:`~blogapi.services._shared.errors.InvalidTokenError` for
    anything else that fails verification. It never checks revocation.
    """

    @property
    def access_expires(self) -> timedelta: ...

    @property
    def refresh_expires(self) -> timedelta: ...

    def create_access_token(
        self,
        *,
        identity: str,
        additional_claims: dict[str, Any] | None = None,
        expires_delta: timedelta | None = None,
    ) -> str: ...

    def create_refresh_token(
        self,
        *,
        identity: str,
        additional_claims: dict[str, Any] | None = None,
        expires_delta: timedelta | None = None,
    ) -> str: ...

    def decode(self, token: str) -> dict[str, Any]: ...

    def get_jti(self, token: str) -> str: ...

    def get_subject(self, token: str) -> str: ...

    def get_token_type(self, token: str) -> str: ...

    def get_expires_at(self, token: str) -> datetime: ...
