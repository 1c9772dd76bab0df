"""
DTOs for the user services.

Output DTOs never carry the password hash.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from blogapi.models.user import Role

# --------------------------------------------------------------------------- #
# Input DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class ProfileUpdateIn:
    """
    Self-service profile changes. ``None`` leaves a field untouched.

    :param username: New public handle.
    :type username: str | None
    :param full_name: New display name.
    :type full_name: str | None
    :param avatar: New avatar URL.
    :type avatar: str | None
    """

    username: str | None = None
    full_name: str | None = None
    avatar: str | None = None


@dataclass(frozen=True, slots=True)
class PasswordChangeIn:
    """
    :param old_password: Current password, verified before the change.
    :type old_password: str
    :param new_password: Replacement password.
    :type new_password: str
    """

    old_password: str
    new_password: str


@dataclass(frozen=True, slots=True)
class UserCreateIn:
    """
    Account creation by a super admin (explicit role).

    :param username: Public handle.
    :param email: Login email.
    :param password: Plaintext password to hash.
    :param role: Role to grant.
    :param full_name: Optional display name.
    :param avatar: Optional avatar URL; a generated one is used otherwise.
    """

    username: str
    email: str
    password: str
    role: Role
    full_name: str | None = None
    avatar: str | None = None


@dataclass(frozen=True, slots=True)
class UserUpdateIn:
    """Administrative update of another account. ``None`` leaves a field untouched."""

    username: str | None = None
    email: str | None = None
    full_name: str | None = None
    password: str | None = None
    avatar: str | None = None
    role: Role | None = None
    is_active: bool | None = None


@dataclass(frozen=True, slots=True)
class UserListIn:
    """Filters for the user listing."""

    search: str | None = None
    role: Role | None = None
    is_active: bool | None = None


@dataclass(frozen=True, slots=True)
class ImageUploadIn:
    """
    Raw uploaded image.

    :param filename: Client-side filename (used for the extension check).
    :param content_type: Declared MIME type.
    :param data: File bytes.
    """

    filename: str
    content_type: str | None
    data: bytes


# --------------------------------------------------------------------------- #
# Output DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class UserOut:
    id: str
    username: str
    email: str
    full_name: str | None
    avatar: str | None
    role: str
    is_active: bool
    post_count: int
    created_at: datetime
    updated_at: datetime
