"""Post endpoints, plus the comment and media collections nested under a post."""

from __future__ import annotations

from flask import Blueprint, request

from blogapi.api.deps import (
    comment_service,
    json_response,
    media_service,
    page_response,
    parse_pagination,
    post_service,
    timing,
)
from blogapi.api.gate import optional_auth, require_admin, require_auth
from blogapi.schemas import (
    CommentCreateSchema,
    CommentSchema,
    MediaSchema,
    PostCreateSchema,
    PostSchema,
    PostUpdateSchema,
)
from blogapi.schemas.post import PostFilterSchema

bp = Blueprint("posts", __name__, url_prefix="/posts")

post_schema = PostSchema()
post_list_schema = PostSchema(many=True, exclude=("content",))
post_create_schema = PostCreateSchema()
post_update_schema = PostUpdateSchema()
post_filter_schema = PostFilterSchema()
comment_schema = CommentSchema()
comment_list_schema = CommentSchema(many=True)
comment_create_schema = CommentCreateSchema()
media_schema = MediaSchema()
media_list_schema = MediaSchema(many=True)


@bp.get("")
@optional_auth
@timing
def list_posts():
    """Return the posts visible to the caller."""

    filters = post_filter_schema.load(request.args)
    pagination = parse_pagination()
    items, total = post_service().list_posts(filters, pagination)
    return page_response(post_list_schema.dump(items), total=total, pagination=pagination)


@bp.get("/<string:post_id>")
@optional_auth
@timing
def get_post(post_id: str):
    return json_response({"data": post_schema.dump(post_service().get_post(post_id))})


@bp.get("/slug/<string:slug>")
@optional_auth
@timing
def get_post_by_slug(slug: str):
    return json_response({"data": post_schema.dump(post_service().get_by_slug(slug))})


@bp.post("/<string:post_id>/views")
@timing
def increment_views(post_id: str):
    post_service().increment_views(post_id)
    return json_response({"message": "view count incremented"})


@bp.post("")
@require_auth
@timing
def create_post():
    dto = post_create_schema.load(request.get_json(silent=True) or {})
    post = post_service().create_post(dto)
    return json_response({"data": post_schema.dump(post)}, status=201)


@bp.put("/<string:post_id>")
@require_auth
@timing
def update_post(post_id: str):
    dto = post_update_schema.load(request.get_json(silent=True) or {})
    post = post_service().update_post(post_id, dto)
    return json_response({"data": post_schema.dump(post)})


@bp.delete("/<string:post_id>")
@require_auth
@timing
def delete_post(post_id: str):
    post_service().delete_post(post_id)
    return json_response({"message": "post deleted successfully"})


@bp.post("/<string:post_id>/publish")
@require_admin
@timing
def publish_post(post_id: str):
    return json_response({"data": post_schema.dump(post_service().publish(post_id))})


@bp.post("/<string:post_id>/unpublish")
@require_admin
@timing
def unpublish_post(post_id: str):
    return json_response({"data": post_schema.dump(post_service().unpublish(post_id))})


# ------------------------------ Nested comments -------------------------------


@bp.get("/<string:post_id>/comments")
@optional_auth
@timing
def list_comments(post_id: str):
    """Top-level comments of a post, each carrying its replies."""

    pagination = parse_pagination()
    items, total = comment_service().list_for_post(post_id, pagination)
    return page_response(comment_list_schema.dump(items), total=total, pagination=pagination)


@bp.post("/<string:post_id>/comments")
@require_auth
@timing
def create_comment(post_id: str):
    dto = comment_create_schema.load(request.get_json(silent=True) or {})
    comment = comment_service().create_comment(post_id, dto)
    return json_response({"data": comment_schema.dump(comment)}, status=201)


# -------------------------------- Nested media --------------------------------


@bp.get("/<string:post_id>/media")
@optional_auth
@timing
def list_post_media(post_id: str):
    items = media_service().list_for_post(post_id)
    return json_response({"data": media_list_schema.dump(items)})


@bp.get("/<string:post_id>/media/featured")
@optional_auth
@timing
def featured_post_media(post_id: str):
    return json_response({"data": media_schema.dump(media_service().featured_for_post(post_id))})
