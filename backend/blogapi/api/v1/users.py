"""User management endpoints."""

from __future__ import annotations

from flask import Blueprint, request

from blogapi.api.deps import json_response, page_response, parse_pagination, timing, user_service
from blogapi.api.gate import require_admin, require_auth, require_super_admin
from blogapi.schemas import UserCreateSchema, UserSchema, UserUpdateSchema
from blogapi.schemas.user import UserFilterSchema

bp = Blueprint("users", __name__, url_prefix="/users")

user_schema = UserSchema()
user_list_schema = UserSchema(many=True)
user_create_schema = UserCreateSchema()
user_update_schema = UserUpdateSchema()
user_filter_schema = UserFilterSchema()


@bp.get("")
@require_admin
@timing
def list_users():
    """Return paginated users."""

    filters = user_filter_schema.load(request.args)
    pagination = parse_pagination()
    items, total = user_service().list_users(filters, pagination)
    return page_response(user_list_schema.dump(items), total=total, pagination=pagination)


@bp.get("/<string:user_id>")
@require_auth
@timing
def get_user(user_id: str):
    return json_response({"data": user_schema.dump(user_service().get_user(user_id))})


@bp.post("")
@require_super_admin
@timing
def create_user():
    """Create a user with an explicit role."""

    dto = user_create_schema.load(request.get_json(silent=True) or {})
    user = user_service().create_user(dto)
    return json_response({"data": user_schema.dump(user)}, status=201)


@bp.put("/<string:user_id>")
@require_admin
@timing
def update_user(user_id: str):
    dto = user_update_schema.load(request.get_json(silent=True) or {})
    user = user_service().update_user(user_id, dto)
    return json_response({"data": user_schema.dump(user)})


@bp.delete("/<string:user_id>")
@require_super_admin
@timing
def delete_user(user_id: str):
    user_service().delete_user(user_id)
    return json_response({"message": "user deleted successfully"})
