"""Authentication endpoints: register, login, token refresh and logout."""

from __future__ import annotations

from dataclasses import replace

from flask import Blueprint, request

from blogapi.api.deps import auth_service, json_response, timing
from blogapi.schemas import (
    AuthResponseSchema,
    LoginSchema,
    LogoutSchema,
    RefreshSchema,
    RegisterSchema,
    TokenPairSchema,
)

bp = Blueprint("auth", __name__, url_prefix="/auth")

register_schema = RegisterSchema()
login_schema = LoginSchema()
refresh_schema = RefreshSchema()
logout_schema = LogoutSchema()
auth_response_schema = AuthResponseSchema()
token_pair_schema = TokenPairSchema()


@bp.post("/register")
@timing
def register():
    """Create an account and sign it in."""

    dto = register_schema.load(request.get_json(silent=True) or {})
    result = auth_service().register(dto)
    return json_response({"data": auth_response_schema.dump(result)}, status=201)


@bp.post("/login")
@timing
def login():
    """Authenticate credentials and issue a token pair."""

    dto = login_schema.load(request.get_json(silent=True) or {})
    result = auth_service().login(dto)
    return json_response({"data": auth_response_schema.dump(result)})


@bp.post("/refresh")
@timing
def refresh():
    """Exchange a refresh token for a new pair; the old one stops working."""

    dto = refresh_schema.load(request.get_json(silent=True) or {})
    pair = auth_service().refresh(dto)
    return json_response({"data": token_pair_schema.dump(pair)})


@bp.post("/logout")
@timing
def logout():
    """Revoke the refresh token and, when sent, the bearer access token."""

    dto = logout_schema.load(request.get_json(silent=True) or {})
    scheme, _, token = (request.headers.get("Authorization") or "").partition(" ")
    if scheme == "Bearer" and token:
        dto = replace(dto, access_token=token)
    auth_service().logout(dto)
    return json_response({"message": "logged out successfully"})
