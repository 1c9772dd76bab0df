"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import (
    AuthResponseSchema,
    LoginSchema,
    LogoutSchema,
    RefreshSchema,
    RegisterSchema,
    TokenPairSchema,
)
from .category import CategoryCreateSchema, CategorySchema, CategoryUpdateSchema
from .comment import CommentCreateSchema, CommentSchema, CommentUpdateSchema
from .common import MetaSchema, PaginationQuerySchema, SortQuerySchema, build_meta
from .media import MediaSchema, MediaUpdateSchema
from .post import PostCreateSchema, PostSchema, PostUpdateSchema
from .user import UserCreateSchema, UserSchema, UserUpdateSchema

__all__ = [
    "AuthResponseSchema",
    "LoginSchema",
    "LogoutSchema",
    "RefreshSchema",
    "RegisterSchema",
    "TokenPairSchema",
    "PaginationQuerySchema",
    "SortQuerySchema",
    "MetaSchema",
    "build_meta",
    "CategorySchema",
    "CategoryCreateSchema",
    "CategoryUpdateSchema",
    "CommentSchema",
    "CommentCreateSchema",
    "CommentUpdateSchema",
    "MediaSchema",
    "MediaUpdateSchema",
    "PostSchema",
    "PostCreateSchema",
    "PostUpdateSchema",
    "UserSchema",
    "UserCreateSchema",
    "UserUpdateSchema",
]
