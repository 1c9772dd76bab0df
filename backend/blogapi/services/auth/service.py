# blogapi/services/auth/service.py
from __future__ import annotations

import logging
from datetime import UTC, datetime

from sqlalchemy.exc import IntegrityError

from blogapi.models.user import Role, User
from blogapi.repositories.refresh_token import RefreshTokenRepository
from blogapi.repositories.user import UserRepository
from blogapi.services._shared.base import BaseService, ServiceContext
from blogapi.services._shared.errors import (
    AuthenticationError,
    ConflictError,
    InvalidTokenError,
    RefreshExpiredError,
    TokenExpiredError,
)
from blogapi.services._shared.identity import RequestIdentity
from blogapi.services._shared.ports import PasswordHasher, TokenDenylistStore, TokenProvider
from blogapi.services.auth.dto import AuthOut, LoginIn, LogoutIn, RefreshIn, RegisterIn
from blogapi.services.security.dto import TokenPairOut
from blogapi.services.security.service import (
    ACCESS_TOKEN_TYPE,
    REFRESH_TOKEN_TYPE,
    TokenService,
)
from blogapi.services.users._converters import user_to_out
from blogapi.services.users._integrity import user_conflict

INVALID_CREDENTIALS = "invalid email or password"
INVALID_ACCESS_TOKEN = "invalid or expired token"


class AuthService(BaseService):
    """
    Authentication lifecycle service (register / login / refresh / logout).

    Access tokens are stateless JWTs, revocable early through the JTI
    denylist. Refresh tokens are also stored server side and are single use:
    each refresh revokes the presented token with a conditional update and
    only then mints a new pair.
    """

    def __init__(
        self,
        *,
        token_provider: TokenProvider,
        password_hasher: PasswordHasher,
        denylist_store: TokenDenylistStore,
        identity_claim: str = "user_id",
        ctx: ServiceContext | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """
        Initialize the service with its dependencies.

        :param token_provider: Adapter for issuing/decoding JWTs.
        :param password_hasher: Adapter hashing and verifying passwords.
        :param denylist_store: Denylist for access tokens (JTI-based).
        :param identity_claim: Claim carrying the user id.
        :param ctx: Request context.
        :param logger: Application logger.
        """
        super().__init__(ctx=ctx, logger=logger)
        self.tokens = token_provider
        self.hasher = password_hasher
        self.denylist = denylist_store
        self.identity_claim = identity_claim
        self.token_service = TokenService(token_provider, logger=self.log)

    # ------------------------------------------------------------------ #
    # Register
    # ------------------------------------------------------------------ #

    def register(self, dto: RegisterIn) -> AuthOut:
        """
        Create a ``user``-role account and sign it in.

        :param dto: Registration input.
        :returns: Token pair and profile.
        :raises ConflictError: Email or username already used.
        :raises WeakCredentialError: Password outside the accepted length.
        """
        email = dto.email.strip().lower()
        password_hash = self.hasher.hash(dto.password)

        with self.rw_uow() as uow:
            users: UserRepository = uow.users
            if users.exists_by_email(email):
                raise ConflictError("user", "email already registered")
            if users.exists_by_username(dto.username):
                raise ConflictError("user", "username already taken")

            user = User(
                username=dto.username,
                email=email,
                password_hash=password_hash,
                full_name=(dto.full_name or "").strip() or None,
                role=Role.USER,
                is_active=True,
            )
            user.reset_avatar()
            try:
                users.add(user)
            except IntegrityError as exc:
                conflict = user_conflict(exc)
                if conflict is None:
                    raise
                raise conflict from exc

            pair = self.token_service.issue_pair(user, refresh_repo=uow.refresh_tokens)
            out = self._auth_out(pair, user)

        self.log.info(
            "user.registered",
            extra=self.log_extra(user_id=out.user.id, username=out.user.username),
        )
        return out

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> AuthOut:
        """
        Authenticate credentials and issue a fresh token pair.

        Unknown email and wrong password fail with the same message.

        :param dto: Login input.
        :returns: Token pair and profile.
        :raises AuthenticationError: Invalid credentials or deactivated account.
        """
        with self.rw_uow() as uow:
            user = uow.users.get_by_email(dto.email)
            if user is None or not self.hasher.verify(dto.password, user.password_hash):
                self.log.info("auth.login_failed", extra=self.log_extra())
                raise AuthenticationError(INVALID_CREDENTIALS)
            if not user.is_active:
                raise AuthenticationError("account is deactivated")

            pair = self.token_service.issue_pair(user, refresh_repo=uow.refresh_tokens)
            out = self._auth_out(pair, user)

        self.log.info("auth.login", extra=self.log_extra(user_id=out.user.id))
        return out

    # ------------------------------------------------------------------ #
    # Refresh with atomic rotation
    # ------------------------------------------------------------------ #

    def refresh(self, dto: RefreshIn) -> TokenPairOut:
        """
        Rotate a refresh token and emit a new token pair.

        Security
        --------
        - The presented token must verify, be of type ``refresh`` and exist
          server side.
        - Expired tokens are revoked before the call fails.
        - The old token is revoked with a compare-and-set; when another
          request already consumed it, no tokens are minted.

        :raises RefreshExpiredError: Token past its expiry.
        :raises AuthenticationError: Any other rejection.
        """
        raw = dto.refresh_token
        try:
            claims = self.tokens.decode(raw)
        except TokenExpiredError:
            with self.rw_uow() as uow:
                uow.refresh_tokens.revoke(raw)
            self.log.info("auth.refresh_expired", extra=self.log_extra())
            raise RefreshExpiredError() from None
        except InvalidTokenError:
            raise AuthenticationError("invalid refresh token") from None

        if claims.get("type") != REFRESH_TOKEN_TYPE:
            raise AuthenticationError("invalid token type")

        expired = False
        pair: TokenPairOut | None = None
        user_id: str | None = None
        with self.rw_uow() as uow:
            repo: RefreshTokenRepository = uow.refresh_tokens
            row = repo.find_by_token(raw)
            if row is None:
                raise AuthenticationError("refresh token not found")

            if row.is_expired():
                # committed before failing
                repo.revoke(raw)
                expired = True
            else:
                user = uow.users.get(row.user_id)
                if user is None:
                    raise AuthenticationError("user not found")
                if not user.is_active:
                    raise AuthenticationError("account is deactivated")

                if not repo.revoke(raw):
                    self.log.warning(
                        "auth.refresh_replayed",
                        extra=self.log_extra(user_id=str(user.id)),
                    )
                    raise AuthenticationError("refresh token has been revoked")

                pair = self.token_service.issue_pair(user, refresh_repo=repo)
                user_id = str(user.id)

        if expired or pair is None:
            self.log.info("auth.refresh_expired", extra=self.log_extra())
            raise RefreshExpiredError()

        self.log.info("auth.token_rotated", extra=self.log_extra(user_id=user_id))
        return pair

    # ------------------------------------------------------------------ #
    # Logout
    # ------------------------------------------------------------------ #

    def logout(self, dto: LogoutIn) -> None:
        """
        Revoke the refresh token and, when given, the caller's access token.

        Logging out twice with the same refresh token succeeds.

        :raises AuthenticationError: Unknown refresh token.
        """
        with self.rw_uow() as uow:
            repo: RefreshTokenRepository = uow.refresh_tokens
            row = repo.find_by_token(dto.refresh_token)
            if row is None:
                raise AuthenticationError("refresh token not found")
            owner_id = str(row.user_id)
            revoked = repo.revoke(dto.refresh_token)

        if dto.access_token:
            self._denylist_access_token(dto.access_token, owner_id=owner_id)

        self.log.info(
            "auth.logout",
            extra=self.log_extra(user_id=owner_id, already_revoked=not revoked),
        )

    def _denylist_access_token(self, token: str, *, owner_id: str) -> None:
        try:
            claims = self.tokens.decode(token)
        except InvalidTokenError:
            self.log.debug("auth.logout_access_token_ignored", extra=self.log_extra())
            return
        if claims.get("type") != ACCESS_TOKEN_TYPE:
            return
        if str(claims.get(self.identity_claim)) != owner_id:
            return
        expires_at = datetime.fromtimestamp(int(claims["exp"]), tz=UTC)
        self.denylist.revoke_jti(jti=str(claims["jti"]), expires_at=expires_at)

    # ------------------------------------------------------------------ #
    # Access-token resolution (authentication gate)
    # ------------------------------------------------------------------ #

    def resolve_identity(self, token: str) -> RequestIdentity:
        """
        Turn a bearer access token into the caller identity.

        :param token: Raw access JWT.
        :returns: Identity built from a fresh user lookup.
        :raises InvalidTokenError: Bad or expired signature, wrong type or
            denylisted ``jti``.
        :raises AuthenticationError: User missing or inactive.
        """
        try:
            claims = self.tokens.decode(token)
        except InvalidTokenError as exc:
            raise InvalidTokenError(INVALID_ACCESS_TOKEN) from exc

        jti = claims.get("jti")
        if claims.get("type") != ACCESS_TOKEN_TYPE or not jti:
            raise InvalidTokenError(INVALID_ACCESS_TOKEN)
        if self.denylist.is_revoked(str(jti)):
            raise InvalidTokenError(INVALID_ACCESS_TOKEN)

        user_id = claims.get(self.identity_claim)
        with self.ro_uow() as uow:
            user = uow.users.get(user_id) if user_id else None
            if user is None:
                raise AuthenticationError("user not found")
            if not user.is_active:
                raise AuthenticationError("user account is inactive")
            return RequestIdentity.from_user(user, jti=str(jti))

    # ------------------------------------------------------------------ #

    @staticmethod
    def _auth_out(pair: TokenPairOut, user: User) -> AuthOut:
        return AuthOut(
            access_token=pair.access_token,
            refresh_token=pair.refresh_token,
            token_type=pair.token_type,
            expires_in=pair.expires_in,
            user=user_to_out(user),
        )
