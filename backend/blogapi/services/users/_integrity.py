from __future__ import annotations

from sqlalchemy.exc import IntegrityError

from blogapi.services._shared.errors import ConflictError, violates


def user_conflict(exc: IntegrityError) -> ConflictError | None:
    """Map a racing insert/update on ``users`` to the public conflict message."""
    if violates(exc, "uq_users_email"):
        return ConflictError("user", "email already registered")
    if violates(exc, "uq_users_username"):
        return ConflictError("user", "username already taken")
    return None
