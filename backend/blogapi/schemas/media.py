"""Media resource schemas.

Uploads arrive as ``multipart/form-data``: the ``file`` part is read by the
endpoint, the remaining form fields are validated here.
"""

from __future__ import annotations

from typing import Any

from marshmallow import EXCLUDE, Schema, fields, post_load, validate

from blogapi.models.media import MediaType
from blogapi.services.media.dto import MediaListIn, MediaUpdateIn


class MediaUploadFormSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    alt_text = fields.String(load_default=None, validate=validate.Length(max=500))
    description = fields.String(load_default=None, validate=validate.Length(max=2000))
    post_id = fields.String(load_default=None)
    is_featured = fields.Boolean(load_default=False)


class MediaUpdateSchema(Schema):
    alt_text = fields.String(allow_none=True, validate=validate.Length(max=500))
    description = fields.String(allow_none=True, validate=validate.Length(max=2000))
    post_id = fields.String(allow_none=True)
    is_featured = fields.Boolean()

    @post_load
    def to_dto(self, data: dict[str, Any], **_: Any) -> MediaUpdateIn:
        return MediaUpdateIn(**data)


class MediaFilterSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    user_id = fields.String(load_default=None)
    post_id = fields.String(load_default=None)
    is_featured = fields.Boolean(load_default=None)
    media_type = fields.String(
        load_default=None, validate=validate.OneOf([kind.value for kind in MediaType])
    )

    @post_load
    def to_dto(self, data: dict[str, Any], **_: Any) -> MediaListIn:
        return MediaListIn(**data)


class MediaSchema(Schema):
    """Public representation of a media item."""

    id = fields.String(required=True)
    filename = fields.String(required=True)
    original_name = fields.String(required=True)
    mime_type = fields.String(required=True)
    url = fields.String(required=True)
    size = fields.Integer(required=True)
    width = fields.Integer(allow_none=True)
    height = fields.Integer(allow_none=True)
    alt_text = fields.String(allow_none=True)
    description = fields.String(allow_none=True)
    media_type = fields.String(required=True)
    post_id = fields.String(allow_none=True)
    user_id = fields.String(required=True)
    is_featured = fields.Boolean(required=True)
    created_at = fields.DateTime(required=True)
    updated_at = fields.DateTime(required=True)
