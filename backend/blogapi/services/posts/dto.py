"""
DTOs for PostService.

``PostOut`` is shared by the list and detail endpoints; list responses omit
``content`` at the schema level.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from blogapi.models.post import PostStatus

# --------------------------------------------------------------------------- #
# Input DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class PostCreateIn:
    """
    :param title: Post title.
    :param slug: URL slug, unique across posts.
    :param content: Raw HTML; sanitized before storage.
    :param category_id: Existing category id.
    :param excerpt: Optional summary.
    :param featured_image: Optional image URL.
    :param tags: Free-form tags.
    :param status: Initial status (``draft`` by default).
    """

    title: str
    slug: str
    content: str
    category_id: str
    excerpt: str | None = None
    featured_image: str | None = None
    tags: list[str] = field(default_factory=list)
    status: PostStatus = PostStatus.DRAFT


@dataclass(frozen=True, slots=True)
class PostUpdateIn:
    """Partial update; ``None`` keeps the current value."""

    title: str | None = None
    slug: str | None = None
    content: str | None = None
    category_id: str | None = None
    excerpt: str | None = None
    featured_image: str | None = None
    tags: list[str] | None = None
    status: PostStatus | None = None


@dataclass(frozen=True, slots=True)
class PostListIn:
    """Listing filters; visibility is applied on top by the service."""

    search: str | None = None
    status: PostStatus | None = None
    category_id: str | None = None
    tag: str | None = None
    author_id: str | None = None


# --------------------------------------------------------------------------- #
# Output DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class PostAuthorOut:
    id: str
    username: str
    full_name: str | None
    avatar: str | None


@dataclass(frozen=True, slots=True)
class PostCategoryOut:
    id: str
    name: str
    slug: str


@dataclass(frozen=True, slots=True)
class PostOut:
    id: str
    title: str
    slug: str
    content: str
    excerpt: str | None
    featured_image: str | None
    status: str
    views: int
    author_id: str
    author: PostAuthorOut
    category_id: str
    category: PostCategoryOut
    tags: list[str]
    comment_count: int
    published_at: datetime | None
    created_at: datetime
    updated_at: datetime
