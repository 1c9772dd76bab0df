"""Media endpoints: multipart uploads and metadata management."""

from __future__ import annotations

from flask import Blueprint, request

from blogapi.api.deps import json_response, media_service, page_response, parse_pagination, timing
from blogapi.api.gate import require_auth
from blogapi.api.uploads import read_upload
from blogapi.schemas import MediaSchema, MediaUpdateSchema
from blogapi.schemas.media import MediaFilterSchema, MediaUploadFormSchema
from blogapi.services.media.dto import MediaUploadIn

bp = Blueprint("media", __name__, url_prefix="/media")

media_schema = MediaSchema()
media_list_schema = MediaSchema(many=True)
media_update_schema = MediaUpdateSchema()
media_filter_schema = MediaFilterSchema()
upload_form_schema = MediaUploadFormSchema()


@bp.post("")
@require_auth
@timing
def upload_media():
    """Upload an image (multipart field ``file`` plus optional metadata)."""

    filename, content_type, data = read_upload()
    form = upload_form_schema.load(request.form)
    media = media_service().upload(
        MediaUploadIn(filename=filename, content_type=content_type, data=data, **form)
    )
    return json_response({"data": media_schema.dump(media)}, status=201)


@bp.get("")
@require_auth
@timing
def list_media():
    """Return paginated media; non-admins only see their own uploads."""

    filters = media_filter_schema.load(request.args)
    pagination = parse_pagination()
    items, total = media_service().list_media(filters, pagination)
    return page_response(media_list_schema.dump(items), total=total, pagination=pagination)


@bp.get("/<string:media_id>")
@timing
def get_media(media_id: str):
    return json_response({"data": media_schema.dump(media_service().get_media(media_id))})


@bp.put("/<string:media_id>")
@require_auth
@timing
def update_media(media_id: str):
    dto = media_update_schema.load(request.get_json(silent=True) or {})
    media = media_service().update_media(media_id, dto)
    return json_response({"data": media_schema.dump(media)})


@bp.delete("/<string:media_id>")
@require_auth
@timing
def delete_media(media_id: str):
    media_service().delete_media(media_id)
    return json_response({"message": "media deleted successfully"})
