"""Comment endpoints addressed by comment id."""

from __future__ import annotations

from flask import Blueprint, request

from blogapi.api.deps import comment_service, json_response, timing
from blogapi.api.gate import require_auth
from blogapi.schemas import CommentSchema, CommentUpdateSchema

bp = Blueprint("comments", __name__, url_prefix="/comments")

comment_schema = CommentSchema()
comment_update_schema = CommentUpdateSchema()


@bp.put("/<string:comment_id>")
@require_auth
@timing
def update_comment(comment_id: str):
    dto = comment_update_schema.load(request.get_json(silent=True) or {})
    comment = comment_service().update_comment(comment_id, dto)
    return json_response({"data": comment_schema.dump(comment)})


@bp.delete("/<string:comment_id>")
@require_auth
@timing
def delete_comment(comment_id: str):
    comment_service().delete_comment(comment_id)
    return json_response({"message": "comment deleted successfully"})
