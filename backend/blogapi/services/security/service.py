"""Token issuing on top of the token provider and the refresh-token table."""

from __future__ import annotations

import logging
from datetime import timedelta

from blogapi.models.base import utcnow
from blogapi.models.user import User
from blogapi.repositories.refresh_token import RefreshTokenRepository
from blogapi.services._shared.ports import TokenProvider

from .dto import TokenPairOut

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


class TokenService:
    """
    Mint access/refresh pairs and record the refresh half.

    The refresh row is written through the repository of the caller's unit of
    work, so minting and persisting commit or roll back together.
    """

    def __init__(self, tokens: TokenProvider, *, logger: logging.Logger) -> None:
        self.tokens = tokens
        self.log = logger

    @property
    def access_expires(self) -> timedelta:
        return self.tokens.access_expires

    @property
    def refresh_expires(self) -> timedelta:
        return self.tokens.refresh_expires

    def access_claims(self, user: User) -> dict[str, str]:
        return {
            "email": user.email,
            "username": user.username,
            "role": user.role.value,
        }

    def issue_pair(self, user: User, *, refresh_repo: RefreshTokenRepository) -> TokenPairOut:
        """
        Create a token pair for ``user`` and persist the refresh token.

        :param user: Authenticated, active user.
        :type user: User
        :param refresh_repo: Repository bound to the caller's unit of work.
        :type refresh_repo: RefreshTokenRepository
        :returns: New token pair.
        :rtype: TokenPairOut
        """
        access = self.tokens.create_access_token(
            identity=str(user.id),
            additional_claims=self.access_claims(user),
        )
        refresh = self.tokens.create_refresh_token(identity=str(user.id))
        refresh_repo.create(
            token=refresh,
            user_id=str(user.id),
            expires_at=utcnow() + self.refresh_expires,
        )
        self.log.debug("tokens.issued", extra={"user_id": str(user.id)})
        return TokenPairOut(
            access_token=access,
            refresh_token=refresh,
            expires_in=int(self.access_expires.total_seconds()),
        )
