# blogapi/services/auth/dto.py
from __future__ import annotations

from dataclasses import dataclass

from blogapi.services.users.dto import UserOut

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class RegisterIn:
    """
    Input DTO for self registration.

    :param username: Public handle.
    :type username: str
    :param email: Login email (normalized by the service).
    :type email: str
    :param password: Raw password (hashed by the service).
    :type password: str
    :param full_name: Optional display name.
    :type full_name: str | None
    """

    username: str
    email: str
    password: str
    full_name: str | None = None


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login.

    :param email: User email.
    :type email: str
    :param password: Raw password (to be verified).
    :type password: str
    """

    email: str
    password: str


@dataclass(frozen=True, slots=True)
class RefreshIn:
    """
    Input DTO for token refresh.

    :param refresh_token: Encoded refresh JWT.
    :type refresh_token: str
    """

    refresh_token: str


@dataclass(frozen=True, slots=True)
class LogoutIn:
    """
    Input DTO for logout.

    :param refresh_token: Encoded refresh JWT to revoke.
    :type refresh_token: str
    :param access_token: Bearer access token sent with the call, if any.
        When valid, its ``jti`` is denylisted until it expires.
    :type access_token: str | None
    """

    refresh_token: str
    access_token: str | None = None


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthOut:
    """
    Output DTO for register/login: token pair plus the user profile.
    """

    access_token: str
    refresh_token: str
    token_type: str
    expires_in: int
    user: UserOut
