"""Comment resource schemas."""

from __future__ import annotations

from typing import Any

from marshmallow import Schema, fields, post_load, validate

from blogapi.services.comments.dto import CommentCreateIn, CommentUpdateIn

from .common import AuthorSchema


class CommentCreateSchema(Schema):
    content = fields.String(required=True, validate=validate.Length(min=1, max=1000))
    parent_id = fields.String(load_default=None, allow_none=True)

    @post_load
    def to_dto(self, data: dict[str, Any], **_: Any) -> CommentCreateIn:
        return CommentCreateIn(**data)


class CommentUpdateSchema(Schema):
    content = fields.String(required=True, validate=validate.Length(min=1, max=1000))

    @post_load
    def to_dto(self, data: dict[str, Any], **_: Any) -> CommentUpdateIn:
        return CommentUpdateIn(**data)


class CommentSchema(Schema):
    """Comment with its author and (for top-level comments) its replies."""

    id = fields.String(required=True)
    content = fields.String(required=True)
    post_id = fields.String(required=True)
    user_id = fields.String(required=True)
    parent_id = fields.String(allow_none=True)
    author = fields.Nested(AuthorSchema)
    replies = fields.List(fields.Nested(lambda: CommentSchema(exclude=("replies",))))
    created_at = fields.DateTime(required=True)
    updated_at = fields.DateTime(required=True)
