from __future__ import annotations

from blogapi.models.base import as_utc
from blogapi.models.user import User

from .dto import UserOut


def user_to_out(user: User, *, post_count: int = 0) -> UserOut:
    return UserOut(
        id=str(user.id),
        username=user.username,
        email=user.email,
        full_name=user.full_name,
        avatar=user.avatar,
        role=user.role.value,
        is_active=bool(user.is_active),
        post_count=int(post_count),
        created_at=as_utc(user.created_at),
        updated_at=as_utc(user.updated_at),
    )
