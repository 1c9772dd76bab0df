from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class MediaUploadIn:
    """
    :param filename: Client-side file name.
    :param content_type: MIME type announced by the client.
    :param data: Raw file bytes.
    :param post_id: Optional post to attach the file to.
    :param is_featured: Mark as the post's featured image.
    """

    filename: str
    content_type: str | None
    data: bytes
    alt_text: str | None = None
    description: str | None = None
    post_id: str | None = None
    is_featured: bool = False


@dataclass(frozen=True, slots=True)
class MediaUpdateIn:
    alt_text: str | None = None
    description: str | None = None
    post_id: str | None = None
    is_featured: bool | None = None


@dataclass(frozen=True, slots=True)
class MediaListIn:
    user_id: str | None = None
    post_id: str | None = None
    is_featured: bool | None = None
    media_type: str | None = None


@dataclass(frozen=True, slots=True)
class MediaOut:
    id: str
    filename: str
    original_name: str
    mime_type: str
    url: str
    size: int
    width: int | None
    height: int | None
    alt_text: str | None
    description: str | None
    media_type: str
    post_id: str | None
    user_id: str
    is_featured: bool
    created_at: datetime
    updated_at: datetime
