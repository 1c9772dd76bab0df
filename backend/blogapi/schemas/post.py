"""Post resource schemas."""

from __future__ import annotations

from typing import Any

from marshmallow import EXCLUDE, Schema, fields, post_load, validate

from blogapi.models.post import PostStatus
from blogapi.services.posts.dto import PostCreateIn, PostListIn, PostUpdateIn

from .category import SLUG_RE
from .common import AuthorSchema

STATUS_VALUES = [status.value for status in PostStatus]

_slug = [
    validate.Length(min=5, max=200),
    validate.Regexp(SLUG_RE, error="slug must be lowercase words separated by hyphens"),
]
_tag = fields.String(validate=validate.Length(min=2, max=50))


class PostCreateSchema(Schema):
    """Payload for creating a post."""

    title = fields.String(required=True, validate=validate.Length(min=5, max=200))
    slug = fields.String(required=True, validate=_slug)
    content = fields.String(required=True, validate=validate.Length(min=10))
    excerpt = fields.String(load_default=None, allow_none=True, validate=validate.Length(max=500))
    featured_image = fields.Url(load_default=None, allow_none=True)
    category_id = fields.String(required=True, validate=validate.Length(min=1))
    tags = fields.List(_tag, load_default=list)
    status = fields.String(load_default=PostStatus.DRAFT.value, validate=validate.OneOf(STATUS_VALUES))

    @post_load
    def to_dto(self, data: dict[str, Any], **_: Any) -> PostCreateIn:
        data["status"] = PostStatus(data["status"])
        return PostCreateIn(**data)


class PostUpdateSchema(Schema):
    """Partial post update; absent keys keep their value."""

    title = fields.String(validate=validate.Length(min=5, max=200))
    slug = fields.String(validate=_slug)
    content = fields.String(validate=validate.Length(min=10))
    excerpt = fields.String(validate=validate.Length(max=500))
    featured_image = fields.Url()
    category_id = fields.String(validate=validate.Length(min=1))
    tags = fields.List(_tag)
    status = fields.String(validate=validate.OneOf(STATUS_VALUES))

    @post_load
    def to_dto(self, data: dict[str, Any], **_: Any) -> PostUpdateIn:
        if "status" in data:
            data["status"] = PostStatus(data["status"])
        return PostUpdateIn(**data)


class PostFilterSchema(Schema):
    """Supported query parameters for listing posts."""

    class Meta:
        unknown = EXCLUDE

    search = fields.String(load_default=None, validate=validate.Length(min=1, max=200))
    status = fields.String(load_default=None, validate=validate.OneOf(STATUS_VALUES))
    category_id = fields.String(load_default=None)
    tag = fields.String(load_default=None)
    author_id = fields.String(load_default=None)

    @post_load
    def to_dto(self, data: dict[str, Any], **_: Any) -> PostListIn:
        if data.get("status"):
            data["status"] = PostStatus(data["status"])
        return PostListIn(**data)


class PostCategorySchema(Schema):
    id = fields.String(required=True)
    name = fields.String(required=True)
    slug = fields.String(required=True)


class PostSchema(Schema):
    """Public representation of a post."""

    id = fields.String(required=True)
    title = fields.String(required=True)
    slug = fields.String(required=True)
    content = fields.String(required=True)
    excerpt = fields.String(allow_none=True)
    featured_image = fields.String(allow_none=True)
    status = fields.String(required=True)
    views = fields.Integer(required=True)
    author_id = fields.String(required=True)
    author = fields.Nested(AuthorSchema)
    category_id = fields.String(required=True)
    category = fields.Nested(PostCategorySchema)
    tags = fields.List(fields.String())
    comment_count = fields.Integer()
    published_at = fields.DateTime(allow_none=True)
    created_at = fields.DateTime(required=True)
    updated_at = fields.DateTime(required=True)
