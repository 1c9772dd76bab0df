from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any, cast

import jwt as pyjwt
from flask_jwt_extended.exceptions import JWTExtendedException

from blogapi.services._shared.errors import InvalidTokenError, TokenExpiredError
from blogapi.services._shared.ports import TokenProvider


@dataclass(slots=True)
class JWTTokenProvider(TokenProvider):
    """
    Adapter for Flask-JWT-Extended.

    Signing key, algorithm, identity claim (``user_id``) and accepted decode
    algorithms come from the Flask config, so every call needs an active app
    context.

    :param access_ttl: Default access token lifetime.
    :param refresh_ttl: Default refresh token lifetime.
    """

    access_ttl: timedelta = timedelta(hours=1)
    refresh_ttl: timedelta = timedelta(days=7)

    @property
    def access_expires(self) -> timedelta:
        return self.access_ttl

    @property
    def refresh_expires(self) -> timedelta:
        return self.refresh_ttl

    def create_access_token(
        self,
        *,
        identity: str,
        additional_claims: dict[str, Any] | None = None,
        expires_delta: timedelta | None = None,
    ) -> str:
        from flask_jwt_extended import create_access_token as _create_access

        return cast(
            str,
            _create_access(
                identity=str(identity),
                additional_claims=dict(additional_claims or {}),
                expires_delta=expires_delta or self.access_ttl,
            ),
        )

    def create_refresh_token(
        self,
        *,
        identity: str,
        additional_claims: dict[str, Any] | None = None,
        expires_delta: timedelta | None = None,
    ) -> str:
        from flask_jwt_extended import create_refresh_token as _create_refresh

        return cast(
            str,
            _create_refresh(
                identity=str(identity),
                additional_claims=dict(additional_claims or {}),
                expires_delta=expires_delta or self.refresh_ttl,
            ),
        )

    def decode(self, token: str) -> dict[str, Any]:
        """
        Verify ``token`` and return its claims.

        :raises TokenExpiredError: Signature valid but ``exp`` passed.
        :raises InvalidTokenError: Malformed, tampered, wrong algorithm or
            missing required claims.
        """
        from flask_jwt_extended import decode_token

        if not token or not isinstance(token, str):
            raise InvalidTokenError()
        try:
            return cast(dict[str, Any], decode_token(token))
        except pyjwt.ExpiredSignatureError as exc:
            raise TokenExpiredError() from exc
        except (pyjwt.PyJWTError, JWTExtendedException) as exc:
            raise InvalidTokenError() from exc

    def get_jti(self, token: str) -> str:
        return cast(str, self.decode(token)["jti"])

    def get_subject(self, token: str) -> str:
        from flask import current_app

        claim = current_app.config.get("JWT_IDENTITY_CLAIM", "sub")
        return str(self.decode(token)[claim])

    def get_token_type(self, token: str) -> str:
        # Flask-JWT-Extended sets "type": "access" | "refresh"
        return cast(str, self.decode(token)["type"])

    def get_expires_at(self, token: str) -> datetime:
        exp = int(self.decode(token)["exp"])
        return datetime.fromtimestamp(exp, tz=UTC)
