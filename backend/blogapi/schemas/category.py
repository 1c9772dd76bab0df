"""Category resource schemas."""

from __future__ import annotations

from typing import Any

from marshmallow import Schema, fields, post_load, validate

from blogapi.services.categories.dto import CategoryCreateIn, CategoryUpdateIn

SLUG_RE = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


class CategoryCreateSchema(Schema):
    name = fields.String(required=True, validate=validate.Length(min=2, max=100))
    slug = fields.String(
        required=True,
        validate=[
            validate.Length(min=2, max=100),
            validate.Regexp(SLUG_RE, error="slug must be lowercase words separated by hyphens"),
        ],
    )
    description = fields.String(load_default=None, allow_none=True, validate=validate.Length(max=500))

    @post_load
    def to_dto(self, data: dict[str, Any], **_: Any) -> CategoryCreateIn:
        return CategoryCreateIn(**data)


class CategoryUpdateSchema(Schema):
    name = fields.String(validate=validate.Length(min=2, max=100))
    slug = fields.String(
        validate=[
            validate.Length(min=2, max=100),
            validate.Regexp(SLUG_RE, error="slug must be lowercase words separated by hyphens"),
        ]
    )
    description = fields.String(allow_none=True, validate=validate.Length(max=500))

    @post_load
    def to_dto(self, data: dict[str, Any], **_: Any) -> CategoryUpdateIn:
        return CategoryUpdateIn(**data)


class CategoryFilterSchema(Schema):
    class Meta:
        unknown = "exclude"

    search = fields.String(load_default=None, validate=validate.Length(min=1, max=100))


class CategorySchema(Schema):
    """Public representation of a category."""

    id = fields.String(required=True)
    name = fields.String(required=True)
    slug = fields.String(required=True)
    description = fields.String(allow_none=True)
    post_count = fields.Integer()
    created_at = fields.DateTime(required=True)
    updated_at = fields.DateTime(required=True)
