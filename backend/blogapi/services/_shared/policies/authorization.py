"""
Role and ownership rules.

Every function here is pure and total: it accepts ``None`` or malformed
actors, never raises and never touches the database. An *actor* is anything
exposing ``user_id`` and ``role`` (usually a
:class:`~blogapi.services._shared.identity.RequestIdentity`).
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Protocol

from blogapi.models.user import Role


class Actor(Protocol):
    user_id: str
    role: Role


class Decision(enum.Enum):
    ALLOW = "allow"
    DENY = "deny"

    @property
    def allowed(self) -> bool:
        return self is Decision.ALLOW


class Action(str, enum.Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    PUBLISH = "publish"
    UNPUBLISH = "unpublish"


class ResourceKind(str, enum.Enum):
    POST = "post"
    COMMENT = "comment"
    MEDIA = "media"
    CATEGORY = "category"
    USER = "user"


@dataclass(frozen=True, slots=True)
class ResourceRef:
    """What is being acted upon: its kind and, when owned, its owner id.

    For ``USER`` resources ``owner_id`` is the target user's own id.
    """

    kind: ResourceKind
    owner_id: str | None = None


def _role_of(actor: Any) -> Role | None:
    if actor is None:
        return None
    return Role.parse(getattr(actor, "role", None))


def _id_of(actor: Any) -> str | None:
    value = getattr(actor, "user_id", None) if actor is not None else None
    return str(value) if value is not None else None


# --------------------------------------------------------------------------- #
# Predicates
# --------------------------------------------------------------------------- #


def is_super_admin(actor: Any) -> bool:
    return _role_of(actor) is Role.SUPER_ADMIN


def is_admin(actor: Any) -> bool:
    """Admins and super admins."""
    role = _role_of(actor)
    return role is not None and role.at_least(Role.ADMIN)


def is_owner(actor: Any, owner_id: Any) -> bool:
    actor_id = _id_of(actor)
    return actor_id is not None and owner_id is not None and actor_id == str(owner_id)


def can_manage_user(actor: Any, target_user_id: Any) -> bool:
    """Super admins manage everyone; other users only themselves."""
    return is_super_admin(actor) or is_owner(actor, target_user_id)


def can_modify_owned(actor: Any, owner_id: Any) -> bool:
    """Update/delete rule for posts, comments and media: owner or admin."""
    return is_admin(actor) or is_owner(actor, owner_id)


def can_manage_categories(actor: Any) -> bool:
    return is_admin(actor)


def can_publish(actor: Any) -> bool:
    """Publishing is an admin decision, independent of authorship."""
    return is_admin(actor)


def can_view_post(actor: Any, post: Any) -> bool:
    """Published posts are public; other states only for the author and admins."""
    status = getattr(post, "status", None)
    if getattr(status, "value", status) == "published":
        return True
    return can_modify_owned(actor, getattr(post, "author_id", None))


def can_view_user_media(actor: Any, user_id: Any) -> bool:
    return is_admin(actor) or is_owner(actor, user_id)


# --------------------------------------------------------------------------- #
# Dispatcher
# --------------------------------------------------------------------------- #


def decide(actor: Any, action: Action | str, resource: ResourceRef) -> Decision:
    """
    Decide whether ``actor`` may perform ``action`` on ``resource``.

    Anonymous actors and unknown ``(kind, action)`` pairs are denied.

    :param actor: Authenticated identity or ``None``.
    :param action: Requested action.
    :param resource: Target descriptor.
    :returns: :attr:`Decision.ALLOW` or :attr:`Decision.DENY`.
    :rtype: Decision
    """
    try:
        action = Action(action)
    except ValueError:
        return Decision.DENY
    if _role_of(actor) is None or _id_of(actor) is None:
        return Decision.DENY

    kind = getattr(resource, "kind", None)
    owner_id = getattr(resource, "owner_id", None)
    allowed = False

    if kind in (ResourceKind.POST, ResourceKind.COMMENT, ResourceKind.MEDIA):
        if action is Action.CREATE:
            allowed = True
        elif action in (Action.UPDATE, Action.DELETE):
            allowed = can_modify_owned(actor, owner_id)
        elif action in (Action.PUBLISH, Action.UNPUBLISH):
            allowed = kind is ResourceKind.POST and can_publish(actor)
    elif kind is ResourceKind.CATEGORY:
        allowed = action in (Action.CREATE, Action.UPDATE, Action.DELETE) and (
            can_manage_categories(actor)
        )
    elif kind is ResourceKind.USER:
        if action in (Action.CREATE, Action.DELETE):
            allowed = is_super_admin(actor)
        elif action is Action.UPDATE:
            allowed = can_manage_user(actor, owner_id)

    return Decision.ALLOW if allowed else Decision.DENY
