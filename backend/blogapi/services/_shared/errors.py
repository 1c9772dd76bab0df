"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic**: they never depend on Flask or
HTTP. They are the stable contract between repositories, adapters, domain
models and application services.

Translation to HTTP responses (RFC 7807) happens in
``blogapi/core/errors.py`` through ``translate_service_error()``.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    Parameters
    ----------
    exc : IntegrityError
        The exception raised by SQLAlchemy during flush/commit.
    constraint_name : str
        Constraint name (e.g. ``'uq_users_email'``). SQLite reports the
        column instead (``users.email``), which is accepted as well.

    Returns
    -------
    bool
        True if the IntegrityError matches the given constraint.
    """
    message = str(exc.orig).lower() if exc.orig else ""
    if constraint_name.lower() in message:
        return True
    # uq_<table>_<column> -> "<table>.<column>" as reported by SQLite
    if constraint_name.startswith("uq_"):
        table, _, column = constraint_name[3:].partition("_")
        return bool(column) and f"{table}.{column}" in message
    return False


# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - ``str(err)`` is safe to show to clients.
    """

    pass


# --------------------------------------------------------------------------- #
# Specific domain-level errors
# --------------------------------------------------------------------------- #


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    Raised when an entity is not found (or not visible to the caller).

    :param entity: Entity name (e.g., "post").
    :type entity: str
    :param key: Identifier or search key (kept for logs only).
    :type key: str | int | None
    """

    entity: str
    key: str | int | None = None

    def __str__(self) -> str:
        return f"{self.entity} not found"


@dataclass(slots=True)
class ConflictError(ServiceError):
    """
    Raised when a unique constraint or business rule conflict occurs.

    :param entity: Entity name (e.g., "user").
    :type entity: str
    :param detail: Client-facing explanation ("email already registered").
    :type detail: str
    """

    entity: str
    detail: str

    def __str__(self) -> str:
        return self.detail


class BusinessRuleError(ServiceError):
    """A request that is well-formed but breaks a domain rule (400)."""


class WeakCredentialError(ServiceError):
    """Plaintext password outside the accepted length window."""

    def __init__(self, message: str = "password does not meet length requirements") -> None:
        super().__init__(message)


class AuthenticationError(ServiceError):
    """Credentials or token could not be authenticated (401)."""

    def __init__(self, message: str = "authentication failed") -> None:
        super().__init__(message)


class InvalidTokenError(AuthenticationError):
    """Token is malformed, tampered, signed with another algorithm or expired."""

    def __init__(self, message: str = "invalid token") -> None:
        super().__init__(message)


class TokenExpiredError(InvalidTokenError):
    """Token signature is valid but ``exp`` has passed."""

    def __init__(self, message: str = "token expired") -> None:
        super().__init__(message)


class RefreshExpiredError(AuthenticationError):
    """Presented refresh token is past its expiry (its row gets revoked)."""

    def __init__(self, message: str = "refresh token expired") -> None:
        super().__init__(message)


class AuthorizationError(ServiceError):
    """Authenticated actor is not allowed to perform the action (403)."""

    def __init__(self, message: str = "you don't have permission to perform this action") -> None:
        super().__init__(message)


class StorageError(ServiceError):
    """File storage backend failed to write, read or delete."""

