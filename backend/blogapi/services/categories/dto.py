from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class CategoryCreateIn:
    """
    :param name: Display name.
    :param slug: URL slug, unique across categories.
    :param description: Optional description.
    """

    name: str
    slug: str
    description: str | None = None


@dataclass(frozen=True, slots=True)
class CategoryUpdateIn:
    """Partial update; ``None`` keeps the current value."""

    name: str | None = None
    slug: str | None = None
    description: str | None = None


@dataclass(frozen=True, slots=True)
class CategoryOut:
    id: str
    name: str
    slug: str
    description: str | None
    post_count: int
    created_at: datetime
    updated_at: datetime
