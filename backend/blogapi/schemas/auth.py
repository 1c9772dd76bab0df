"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from typing import Any

from marshmallow import Schema, fields, post_load, validate

from blogapi.services.auth.dto import LoginIn, LogoutIn, RefreshIn, RegisterIn

from .user import UserSchema


class RegisterSchema(Schema):
    """Input payload for account registration."""

    email = fields.Email(required=True, validate=validate.Length(max=254))
    username = fields.String(required=True, validate=validate.Length(min=3, max=50))
    password = fields.String(required=True, validate=validate.Length(min=8, max=100))
    full_name = fields.String(load_default=None, allow_none=True, validate=validate.Length(max=100))

    @post_load
    def to_dto(self, data: dict[str, Any], **_: Any) -> RegisterIn:
        return RegisterIn(**data)


class LoginSchema(Schema):
    """Input payload for authenticating a user."""

    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(required=True, validate=validate.Length(min=1))

    @post_load
    def to_dto(self, data: dict[str, Any], **_: Any) -> LoginIn:
        return LoginIn(**data)


class RefreshSchema(Schema):
    refresh_token = fields.String(required=True, validate=validate.Length(min=1))

    @post_load
    def to_dto(self, data: dict[str, Any], **_: Any) -> RefreshIn:
        return RefreshIn(**data)


class LogoutSchema(Schema):
    refresh_token = fields.String(required=True, validate=validate.Length(min=1))

    @post_load
    def to_dto(self, data: dict[str, Any], **_: Any) -> LogoutIn:
        return LogoutIn(**data)


class TokenPairSchema(Schema):
    """Response payload containing a token pair."""

    access_token = fields.String(required=True)
    refresh_token = fields.String(required=True)
    token_type = fields.String(dump_default="Bearer")
    expires_in = fields.Integer(required=True)


class AuthResponseSchema(TokenPairSchema):
    """Token pair plus the authenticated user's profile."""

    user = fields.Nested(UserSchema, required=True)
