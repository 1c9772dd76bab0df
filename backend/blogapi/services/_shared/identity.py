"""Authenticated principal passed explicitly from the gate to services."""

from __future__ import annotations

from dataclasses import dataclass

from blogapi.models.user import Role


@dataclass(frozen=True, slots=True)
class RequestIdentity:
    """
    Who is making the request.

    Built once per request by the authentication gate from a verified access
    token and a fresh user lookup; services never read it from globals.

    :param user_id: Authenticated user id (UUID string).
    :type user_id: str
    :param role: Role at lookup time (not the token claim).
    :type role: Role
    :param username: Public handle.
    :type username: str
    :param email: Account email.
    :type email: str
    :param jti: Id of the access token that authenticated the request.
    :type jti: str | None
    """

    user_id: str
    role: Role
    username: str = ""
    email: str = ""
    jti: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role.at_least(Role.ADMIN)

    @property
    def is_super_admin(self) -> bool:
        return self.role is Role.SUPER_ADMIN

    @classmethod
    def from_user(cls, user, *, jti: str | None = None) -> RequestIdentity:
        return cls(
            user_id=str(user.id),
            role=user.role,
            username=user.username,
            email=user.email,
            jti=jti,
        )
