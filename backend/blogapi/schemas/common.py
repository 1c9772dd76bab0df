"""Common Marshmallow schemas shared across resources."""

from __future__ import annotations

from math import ceil
from typing import Any

from marshmallow import Schema, fields, post_load, validate


class SortQuerySchema(Schema):
    """Parse comma-separated ``sort`` query parameters into a list."""

    sort = fields.String(load_default="")

    @post_load
    def split_sort(self, data: dict[str, Any], **_: Any) -> dict[str, Any]:
        raw = data.get("sort") or ""
        tokens = [segment.strip() for segment in raw.split(",") if segment.strip()]
        data["sort"] = tokens
        return data


class PaginationQuerySchema(SortQuerySchema):
    """Validate pagination parameters with configurable defaults."""

    class Meta:
        unknown = "exclude"

    def __init__(self, *, default_limit: int = 10, max_limit: int = 100, **kwargs: Any) -> None:
        self._default_limit = default_limit
        self._max_limit = max_limit
        super().__init__(**kwargs)

    page = fields.Integer(load_default=1, validate=validate.Range(min=1))
    limit = fields.Integer(validate=validate.Range(min=1))

    @post_load
    def apply_defaults(self, data: dict[str, Any], **_: Any) -> dict[str, Any]:
        sort_value = data.get("sort")
        if isinstance(sort_value, str):
            tokens = [segment.strip() for segment in sort_value.split(",") if segment.strip()]
            data["sort"] = tokens
        elif sort_value is None:
            data["sort"] = []
        limit = data.get("limit", self._default_limit)
        data["limit"] = min(max(limit, 1), self._max_limit)
        data.setdefault("page", 1)
        return data


class MetaSchema(Schema):
    """Metadata block for paginated responses."""

    total = fields.Integer(required=True)
    page = fields.Integer(required=True)
    limit = fields.Integer(required=True)
    total_pages = fields.Integer(required=True)


class AuthorSchema(Schema):
    """Compact user representation embedded in posts and comments."""

    id = fields.String(required=True)
    username = fields.String(required=True)
    full_name = fields.String(allow_none=True)
    avatar = fields.String(allow_none=True)


def build_meta(*, total: int, page: int, limit: int) -> dict[str, int]:
    """Return a ``meta`` mapping for paginated responses."""

    total_pages = ceil(total / limit) if limit > 0 else 0
    return {"total": int(total), "page": int(page), "limit": int(limit), "total_pages": total_pages}
