# tests/unit/services/test_auth_token_lifecycle.py
from __future__ import annotations

from datetime import timedelta

import pytest
from freezegun import freeze_time
from sqlalchemy import select

from blogapi.models.base import utcnow
from blogapi.models.refresh_token import RefreshToken
from blogapi.models.user import Role, User
from blogapi.services._shared.errors import (
    AuthenticationError,
    ConflictError,
    InvalidTokenError,
    RefreshExpiredError,
    WeakCredentialError,
)
from blogapi.services._shared.ports import InMemoryDenylistStore
from blogapi.services.auth.dto import LoginIn, LogoutIn, RefreshIn, RegisterIn
from blogapi.services.auth.service import AuthService
from tests.factories.token import RefreshTokenFactory
from tests.factories.user import DEFAULT_PASSWORD, UserFactory


# ------------------------------ Fixtures ---------------------------------- #
@pytest.fixture()
def service(providers) -> AuthService:
    """AuthService wired to the real JWT/bcrypt adapters and a private denylist."""
    return AuthService(
        token_provider=providers.tokens,
        password_hasher=providers.hasher,
        denylist_store=InMemoryDenylistStore(),
    )


def _row(session, token: str) -> RefreshToken:
    row = session.execute(select(RefreshToken).where(RefreshToken.token == token)).scalar_one()
    session.refresh(row)
    return row


# ------------------------------ Register ---------------------------------- #
def test_register_creates_plain_user_and_tokens(service, session):
    out = service.register(
        RegisterIn(username="alice", email=" Alice@X.com ", password="longenough1")
    )

    assert out.user.role == Role.USER.value
    assert out.user.is_active is True
    assert out.user.email == "alice@x.com"
    assert out.token_type == "Bearer"
    assert _row(session, out.refresh_token).is_revoked is False

    stored = session.execute(select(User).where(User.email == "alice@x.com")).scalar_one()
    assert stored.password_hash != "longenough1"


def test_register_duplicate_email(service):
    UserFactory(email="taken@example.com")
    with pytest.raises(ConflictError, match="email already registered"):
        service.register(RegisterIn(username="fresh", email="taken@example.com", password="longenough1"))


def test_register_duplicate_username(service):
    UserFactory(username="taken")
    with pytest.raises(ConflictError, match="username already taken"):
        service.register(RegisterIn(username="taken", email="new@example.com", password="longenough1"))


def test_register_weak_password(service):
    with pytest.raises(WeakCredentialError):
        service.register(RegisterIn(username="weak", email="weak@example.com", password="abc"))


# -------------------------------- Login ----------------------------------- #
def test_login_wrong_password_and_unknown_email_look_the_same(service):
    user = UserFactory()
    with pytest.raises(AuthenticationError) as wrong:
        service.login(LoginIn(email=user.email, password="not-the-password"))
    with pytest.raises(AuthenticationError) as unknown:
        service.login(LoginIn(email="nobody@example.com", password=DEFAULT_PASSWORD))

    assert str(wrong.value) == str(unknown.value) == "invalid email or password"


def test_login_deactivated_account(service):
    user = UserFactory(is_active=False)
    with pytest.raises(AuthenticationError, match="account is deactivated"):
        service.login(LoginIn(email=user.email, password=DEFAULT_PASSWORD))


def test_login_access_token_carries_subject_and_role(service, providers):
    user = UserFactory(role=Role.ADMIN)
    out = service.login(LoginIn(email=user.email, password=DEFAULT_PASSWORD))

    claims = providers.tokens.decode(out.access_token)
    assert claims["user_id"] == str(user.id)
    assert claims["role"] == "admin"
    assert claims["type"] == "access"


# ------------------------------- Refresh ---------------------------------- #
def test_refresh_is_single_use(service, session):
    user = UserFactory()
    first = service.login(LoginIn(email=user.email, password=DEFAULT_PASSWORD))

    second = service.refresh(RefreshIn(refresh_token=first.refresh_token))

    assert second.refresh_token != first.refresh_token
    assert _row(session, first.refresh_token).is_revoked is True
    assert _row(session, second.refresh_token).is_revoked is False

    with pytest.raises(AuthenticationError, match="refresh token has been revoked"):
        service.refresh(RefreshIn(refresh_token=first.refresh_token))


def test_refresh_chain_keeps_working(service):
    user = UserFactory()
    pair = service.login(LoginIn(email=user.email, password=DEFAULT_PASSWORD))
    for _ in range(3):
        pair = service.refresh(RefreshIn(refresh_token=pair.refresh_token))
    assert pair.access_token


def test_refresh_expired_row_is_revoked_before_failing(service, providers, session):
    user = UserFactory()
    token = providers.tokens.create_refresh_token(identity=str(user.id))
    RefreshTokenFactory(token=token, user=user, expires_at=utcnow() - timedelta(minutes=1))

    with pytest.raises(RefreshExpiredError):
        service.refresh(RefreshIn(refresh_token=token))

    assert _row(session, token).is_revoked is True


def test_refresh_expired_signature_is_revoked_before_failing(service, providers, session):
    user = UserFactory()
    with freeze_time(utcnow() - timedelta(days=30)):
        token = providers.tokens.create_refresh_token(identity=str(user.id))
    RefreshTokenFactory(token=token, user=user)

    with pytest.raises(RefreshExpiredError):
        service.refresh(RefreshIn(refresh_token=token))

    assert _row(session, token).is_revoked is True


def test_refresh_rejects_access_tokens(service):
    user = UserFactory()
    pair = service.login(LoginIn(email=user.email, password=DEFAULT_PASSWORD))

    with pytest.raises(AuthenticationError, match="invalid token type"):
        service.refresh(RefreshIn(refresh_token=pair.access_token))


def test_refresh_unknown_token(service, providers):
    user = UserFactory()
    token = providers.tokens.create_refresh_token(identity=str(user.id))

    with pytest.raises(AuthenticationError, match="refresh token not found"):
        service.refresh(RefreshIn(refresh_token=token))


def test_refresh_for_deactivated_user(service, session):
    user = UserFactory()
    pair = service.login(LoginIn(email=user.email, password=DEFAULT_PASSWORD))
    user.is_active = False
    session.commit()

    with pytest.raises(AuthenticationError, match="account is deactivated"):
        service.refresh(RefreshIn(refresh_token=pair.refresh_token))


def test_refresh_garbage(service):
    with pytest.raises(AuthenticationError, match="invalid refresh token"):
        service.refresh(RefreshIn(refresh_token="not-a-jwt"))


# -------------------------------- Logout ---------------------------------- #
def test_logout_is_idempotent(service, session):
    user = UserFactory()
    pair = service.login(LoginIn(email=user.email, password=DEFAULT_PASSWORD))

    service.logout(LogoutIn(refresh_token=pair.refresh_token))
    service.logout(LogoutIn(refresh_token=pair.refresh_token))

    assert _row(session, pair.refresh_token).is_revoked is True


def test_logout_unknown_refresh_token(service):
    with pytest.raises(AuthenticationError, match="refresh token not found"):
        service.logout(LogoutIn(refresh_token="never-issued"))


def test_logout_denylists_own_access_token(service):
    user = UserFactory()
    pair = service.login(LoginIn(email=user.email, password=DEFAULT_PASSWORD))
    assert service.resolve_identity(pair.access_token).user_id == str(user.id)

    service.logout(LogoutIn(refresh_token=pair.refresh_token, access_token=pair.access_token))

    with pytest.raises(InvalidTokenError, match="invalid or expired token"):
        service.resolve_identity(pair.access_token)


def test_logout_ignores_someone_elses_access_token(service):
    alice, bob = UserFactory(), UserFactory()
    a = service.login(LoginIn(email=alice.email, password=DEFAULT_PASSWORD))
    b = service.login(LoginIn(email=bob.email, password=DEFAULT_PASSWORD))

    service.logout(LogoutIn(refresh_token=a.refresh_token, access_token=b.access_token))

    assert service.resolve_identity(b.access_token).user_id == str(bob.id)


# --------------------------- Identity resolution -------------------------- #
def test_resolve_identity_uses_current_role(service, session):
    user = UserFactory()
    pair = service.login(LoginIn(email=user.email, password=DEFAULT_PASSWORD))
    user.role = Role.ADMIN
    session.commit()

    identity = service.resolve_identity(pair.access_token)
    assert identity.role is Role.ADMIN
    assert identity.is_admin


def test_resolve_identity_rejects_refresh_tokens(service):
    user = UserFactory()
    pair = service.login(LoginIn(email=user.email, password=DEFAULT_PASSWORD))
    with pytest.raises(InvalidTokenError):
        service.resolve_identity(pair.refresh_token)


def test_resolve_identity_inactive_user(service, session):
    user = UserFactory()
    pair = service.login(LoginIn(email=user.email, password=DEFAULT_PASSWORD))
    user.is_active = False
    session.commit()

    with pytest.raises(AuthenticationError, match="user account is inactive"):
        service.resolve_identity(pair.access_token)
