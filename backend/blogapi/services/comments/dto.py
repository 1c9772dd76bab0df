from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True, slots=True)
class CommentCreateIn:
    """
    :param content: Comment text; every HTML tag is stripped.
    :param parent_id: Comment being replied to, on the same post.
    """

    content: str
    parent_id: str | None = None


@dataclass(frozen=True, slots=True)
class CommentUpdateIn:
    content: str


@dataclass(frozen=True, slots=True)
class CommentAuthorOut:
    id: str
    username: str
    full_name: str | None
    avatar: str | None


@dataclass(frozen=True, slots=True)
class CommentOut:
    id: str
    content: str
    post_id: str
    user_id: str
    parent_id: str | None
    author: CommentAuthorOut
    created_at: datetime
    updated_at: datetime
    replies: list[CommentOut] = field(default_factory=list)
