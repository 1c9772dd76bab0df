"""User model and role definitions."""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING
from urllib.parse import quote_plus

from sqlalchemy import Boolean, Enum, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from blogapi.core.extensions import db

from .base import PKMixin, ReprMixin, SoftDeleteMixin, TimestampMixin

if TYPE_CHECKING:
    from .post import Post
    from .refresh_token import RefreshToken


class Role(str, enum.Enum):
    """Closed set of account roles, ordered by :attr:`rank`."""

    USER = "user"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"

    @property
    def rank(self) -> int:
        return _ROLE_RANK[self]

    def at_least(self, other: Role) -> bool:
        """Return ``True`` when this role has the same or higher precedence."""
        return self.rank >= other.rank

    @classmethod
    def parse(cls, value: str | Role | None) -> Role | None:
        """Return the matching role or ``None`` for unknown values."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value))
        except ValueError:
            return None


_ROLE_RANK = {Role.USER: 0, Role.ADMIN: 1, Role.SUPER_ADMIN: 2}

DEFAULT_AVATAR_URL = "https://ui-avatars.com/api/?name={name}&background=random&size=200"


def default_avatar_for(*, full_name: str | None, email: str) -> str:
    """Build the generated avatar URL from the display name or email local part.

    :param full_name: Optional display name.
    :type full_name: str | None
    :param email: Account email, used when ``full_name`` is blank.
    :type email: str
    :returns: Avatar URL with spaces encoded as ``+``.
    :rtype: str
    """
    name = (full_name or "").strip() or email.split("@", 1)[0]
    return DEFAULT_AVATAR_URL.format(name=quote_plus(name))


class User(PKMixin, ReprMixin, TimestampMixin, SoftDeleteMixin, db.Model):
    """
    Account able to authenticate and own content.

    Fields
    ------
    username : str
        Public handle. Unique per system.
    email : str
        Login email. Stored normalized (lowercase, trimmed).
    password_hash : str
        bcrypt hash; never serialized.
    full_name : str | None
        Optional display name.
    avatar : str | None
        Public avatar URL (generated default or uploaded file).
    role : Role
        Authorization role.
    is_active : bool
        Inactive accounts cannot authenticate.
    """

    __tablename__ = "users"

    # Columns
    username: Mapped[str] = mapped_column(String(50), nullable=False)
    email: Mapped[str] = mapped_column(String(254), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    full_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    avatar: Mapped[str | None] = mapped_column(String(500), nullable=True)
    role: Mapped[Role] = mapped_column(
        Enum(
            Role,
            name="user_role",
            native_enum=False,
            length=20,
            values_callable=lambda roles: [r.value for r in roles],
        ),
        nullable=False,
        default=Role.USER,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Constraints & indexes
    __table_args__ = (
        UniqueConstraint("email", name="uq_users_email"),
        UniqueConstraint("username", name="uq_users_username"),
        Index("ix_users_role", "role"),
    )

    # Relationships
    posts: Mapped[list[Post]] = relationship(
        "Post", back_populates="author", lazy="select", passive_deletes=True
    )
    refresh_tokens: Mapped[list[RefreshToken]] = relationship(
        "RefreshToken", back_populates="user", lazy="select", passive_deletes=True
    )

    # -------------------- Derived --------------------
    @property
    def is_admin(self) -> bool:
        return self.role.at_least(Role.ADMIN)

    @property
    def is_super_admin(self) -> bool:
        return self.role is Role.SUPER_ADMIN

    def reset_avatar(self) -> None:
        """Point the avatar back at the generated default."""
        self.avatar = default_avatar_for(full_name=self.full_name, email=self.email)

    # -------------------- Validators --------------------
    @validates("email")
    def _normalize_email(self, key: str, value: str) -> str:
        """
        Normalize and validate email.

        :param key: Field name (``email``).
        :type key: str
        :param value: Email to normalize.
        :type value: str
        :returns: Normalized email (lowercased/trimmed).
        :rtype: str
        :raises ValueError: If email is missing or malformed.
        """
        if not value or not isinstance(value, str):
            raise ValueError("Email is required.")
        v = value.strip().lower()
        # Minimal sanity check; full validation happens at API layer.
        if "@" not in v or "." not in v.split("@")[-1]:
            raise ValueError("Email format looks invalid.")
        return v

    @validates("username")
    def _normalize_username(self, key: str, value: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Username is required.")
        return value.strip()

    @validates("role")
    def _coerce_role(self, key: str, value: Role | str) -> Role:
        role = Role.parse(value)
        if role is None:
            raise ValueError(f"Unknown role: {value!r}")
        return role
