"""Authorization policies shared by resource services."""

from .authorization import (
    Action,
    Decision,
    ResourceKind,
    ResourceRef,
    can_manage_categories,
    can_manage_user,
    can_modify_owned,
    can_publish,
    can_view_post,
    can_view_user_media,
    decide,
    is_admin,
    is_owner,
    is_super_admin,
)

__all__ = [
    "Action",
    "Decision",
    "ResourceKind",
    "ResourceRef",
    "can_manage_categories",
    "can_manage_user",
    "can_modify_owned",
    "can_publish",
    "can_view_post",
    "can_view_user_media",
    "decide",
    "is_admin",
    "is_owner",
    "is_super_admin",
]
