"""Repository package exposing persistence-layer access for all domain models."""

from __future__ import annotations

from blogapi.repositories.base import (
    BaseRepository,
    Page,
    Pagination,
    apply_sorting,
    paginate_select,
)
from blogapi.repositories.category import CategoryRepository
from blogapi.repositories.comment import CommentRepository
from blogapi.repositories.media import MediaRepository
from blogapi.repositories.post import PostRepository
from blogapi.repositories.refresh_token import RefreshTokenRepository
from blogapi.repositories.user import UserRepository

__all__ = [
    # Base
    "BaseRepository",
    "Page",
    "Pagination",
    "paginate_select",
    "apply_sorting",
    # Domain
    "CategoryRepository",
    "CommentRepository",
    "MediaRepository",
    "PostRepository",
    "RefreshTokenRepository",
    "UserRepository",
]
