"""User resource schemas."""

from __future__ import annotations

from typing import Any

from marshmallow import EXCLUDE, Schema, fields, post_load, validate

from blogapi.models.user import Role
from blogapi.services.users.dto import (
    PasswordChangeIn,
    ProfileUpdateIn,
    UserCreateIn,
    UserListIn,
    UserUpdateIn,
)

ROLE_VALUES = [role.value for role in Role]


class UserCreateSchema(Schema):
    """Payload for creating a new user from the admin surface."""

    email = fields.Email(required=True, validate=validate.Length(max=254))
    username = fields.String(required=True, validate=validate.Length(min=3, max=50))
    password = fields.String(required=True, validate=validate.Length(min=8, max=100))
    full_name = fields.String(load_default=None, allow_none=True, validate=validate.Length(max=100))
    avatar = fields.Url(load_default=None, allow_none=True)
    role = fields.String(required=True, validate=validate.OneOf(ROLE_VALUES))

    @post_load
    def to_dto(self, data: dict[str, Any], **_: Any) -> UserCreateIn:
        data["role"] = Role(data["role"])
        return UserCreateIn(**data)


class UserUpdateSchema(Schema):
    """Partial account update; absent keys keep their value."""

    email = fields.Email(validate=validate.Length(max=254))
    username = fields.String(validate=validate.Length(min=3, max=50))
    password = fields.String(validate=validate.Length(min=8, max=100))
    full_name = fields.String(validate=validate.Length(max=100))
    avatar = fields.Url()
    role = fields.String(validate=validate.OneOf(ROLE_VALUES))
    is_active = fields.Boolean()

    @post_load
    def to_dto(self, data: dict[str, Any], **_: Any) -> UserUpdateIn:
        if "role" in data:
            data["role"] = Role(data["role"])
        return UserUpdateIn(**data)


class ProfileUpdateSchema(Schema):
    username = fields.String(validate=validate.Length(min=3, max=50))
    full_name = fields.String(validate=validate.Length(max=100))
    avatar = fields.Url()

    @post_load
    def to_dto(self, data: dict[str, Any], **_: Any) -> ProfileUpdateIn:
        return ProfileUpdateIn(**data)


class PasswordChangeSchema(Schema):
    old_password = fields.String(required=True, validate=validate.Length(min=1))
    new_password = fields.String(required=True, validate=validate.Length(min=8, max=100))

    @post_load
    def to_dto(self, data: dict[str, Any], **_: Any) -> PasswordChangeIn:
        return PasswordChangeIn(**data)


class UserFilterSchema(Schema):
    """Supported query parameters for listing users."""

    class Meta:
        unknown = EXCLUDE

    search = fields.String(load_default=None, validate=validate.Length(min=1, max=100))
    role = fields.String(load_default=None, validate=validate.OneOf(ROLE_VALUES))
    is_active = fields.Boolean(load_default=None)

    @post_load
    def to_dto(self, data: dict[str, Any], **_: Any) -> UserListIn:
        if data.get("role"):
            data["role"] = Role(data["role"])
        return UserListIn(**data)


class UserSchema(Schema):
    """Public representation of a user entity."""

    id = fields.String(required=True)
    email = fields.Email(required=True)
    username = fields.String(required=True)
    full_name = fields.String(allow_none=True)
    avatar = fields.String(allow_none=True)
    role = fields.String(required=True)
    is_active = fields.Boolean(required=True)
    post_count = fields.Integer()
    created_at = fields.DateTime(required=True)
    updated_at = fields.DateTime(required=True)
