"""Self-service profile endpoints for the authenticated user."""

from __future__ import annotations

from flask import Blueprint, request

from blogapi.api.deps import json_response, timing, user_service
from blogapi.api.gate import require_auth
from blogapi.api.uploads import read_upload
from blogapi.schemas import UserSchema
from blogapi.schemas.user import PasswordChangeSchema, ProfileUpdateSchema
from blogapi.services.users.dto import ImageUploadIn

bp = Blueprint("profile", __name__, url_prefix="/profile")

user_schema = UserSchema()
profile_update_schema = ProfileUpdateSchema()
password_change_schema = PasswordChangeSchema()


@bp.get("")
@require_auth
@timing
def get_profile():
    return json_response({"data": user_schema.dump(user_service().get_profile())})


@bp.put("")
@require_auth
@timing
def update_profile():
    dto = profile_update_schema.load(request.get_json(silent=True) or {})
    user = user_service().update_profile(dto)
    return json_response({"data": user_schema.dump(user)})


@bp.put("/password")
@require_auth
@timing
def change_password():
    """Change the password; every refresh token of the account is revoked."""

    dto = password_change_schema.load(request.get_json(silent=True) or {})
    user_service().change_password(dto)
    return json_response({"message": "password changed successfully"})


@bp.post("/avatar")
@require_auth
@timing
def upload_avatar():
    """Upload a new avatar image (multipart field ``file``)."""

    filename, content_type, data = read_upload()
    user = user_service().upload_avatar(
        ImageUploadIn(filename=filename, content_type=content_type, data=data)
    )
    return json_response({"data": user_schema.dump(user)})


@bp.delete("/avatar")
@require_auth
@timing
def delete_avatar():
    """Restore the generated default avatar."""

    user = user_service().delete_avatar()
    return json_response({"data": user_schema.dump(user)})
