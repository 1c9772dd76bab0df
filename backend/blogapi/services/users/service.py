"""
UserService
===========

Self-service profile operations and account management.

- Profile: read, update, change password (revokes every session), avatar
  upload and reset.
- Management: list and read accounts, create with an explicit role (super
  admin), update (``can_manage_user``), soft delete (super admin).
"""

from __future__ import annotations

import logging
from uuid import uuid4

from sqlalchemy.exc import IntegrityError

from blogapi.models.user import User, default_avatar_for
from blogapi.repositories.base import Pagination
from blogapi.repositories.user import UserRepository
from blogapi.services._shared.base import BaseService, ServiceContext
from blogapi.services._shared.errors import (
    AuthorizationError,
    BusinessRuleError,
    ConflictError,
    NotFoundError,
    StorageError,
)
from blogapi.services._shared.files import stored_file
from blogapi.services._shared.policies import Action, ResourceKind, ResourceRef
from blogapi.services._shared.ports import FileStorage, ImageProcessor, PasswordHasher

from ._converters import user_to_out
from ._integrity import user_conflict
from .dto import (
    ImageUploadIn,
    PasswordChangeIn,
    ProfileUpdateIn,
    UserCreateIn,
    UserListIn,
    UserOut,
    UserUpdateIn,
)

AVATAR_DIR = "avatars"


class UserService(BaseService):
    """Profile and account management use cases."""

    def __init__(
        self,
        *,
        password_hasher: PasswordHasher,
        storage: FileStorage,
        image_processor: ImageProcessor,
        ctx: ServiceContext | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        super().__init__(ctx=ctx, logger=logger)
        self.hasher = password_hasher
        self.storage = storage
        self.images = image_processor

    # ------------------------------------------------------------------ #
    # Profile
    # ------------------------------------------------------------------ #

    def get_profile(self) -> UserOut:
        """Return the caller's own account."""
        return self.get_user(self.require_identity().user_id)

    def update_profile(self, dto: ProfileUpdateIn) -> UserOut:
        """
        Update the caller's username, display name or avatar URL.

        :param dto: Fields to change; ``None`` keeps the current value.
        :raises ConflictError: Username taken by another account.
        """
        identity = self.require_identity()
        with self.rw_uow() as uow:
            users: UserRepository = uow.users
            user = self._load_for_update(users, identity.user_id)

            updates: dict[str, object] = {}
            if dto.username and dto.username != user.username:
                if users.exists_by_username(dto.username, exclude_id=user.id):
                    raise ConflictError("user", "username already taken")
                updates["username"] = dto.username
            if dto.full_name:
                updates["full_name"] = dto.full_name
            if dto.avatar:
                updates["avatar"] = dto.avatar

            self._apply(users, user, updates)
            out = user_to_out(user, post_count=users.count_posts(user.id))

        self.log.info(
            "user.profile_updated",
            extra=self.log_extra(user_id=out.id, fields=sorted(updates)),
        )
        return out

    def change_password(self, dto: PasswordChangeIn) -> None:
        """
        Replace the caller's password and sign out every session.

        :raises BusinessRuleError: Old password does not match.
        :raises WeakCredentialError: New password outside the accepted length.
        """
        identity = self.require_identity()
        with self.rw_uow() as uow:
            user = self._load_for_update(uow.users, identity.user_id)
            if not self.hasher.verify(dto.old_password, user.password_hash):
                raise BusinessRuleError("incorrect old password")
            user.password_hash = self.hasher.hash(dto.new_password)
            uow.users.flush()
            revoked = uow.refresh_tokens.revoke_all_by_user(user.id)

        self.log.info(
            "user.password_changed",
            extra=self.log_extra(user_id=identity.user_id, sessions_revoked=revoked),
        )

    def upload_avatar(self, dto: ImageUploadIn) -> UserOut:
        """
        Store a processed avatar image and point the profile at it.

        The previous uploaded avatar (not the generated default) is removed
        once the new one is committed. The new file is removed when the
        database update fails.
        """
        identity = self.require_identity()
        self.images.validate(filename=dto.filename, content_type=dto.content_type, size=len(dto.data))
        processed = self.images.process(dto.data)
        path = f"{AVATAR_DIR}/{uuid4().hex}.{processed.extension}"

        with stored_file(self.storage, processed.data, path, logger=self.log) as stored:
            with self.rw_uow() as uow:
                users: UserRepository = uow.users
                user = self._load_for_update(users, identity.user_id)
                previous = user.avatar
                users.assign_updates(user, {"avatar": stored.url})
                out = user_to_out(user, post_count=users.count_posts(user.id))

        self._discard_stored(previous)
        self.log.info(
            "user.avatar_uploaded",
            extra=self.log_extra(user_id=out.id, path=stored.path, size=stored.size),
        )
        return out

    def delete_avatar(self) -> UserOut:
        """Restore the generated default avatar."""
        identity = self.require_identity()
        with self.rw_uow() as uow:
            users: UserRepository = uow.users
            user = self._load_for_update(users, identity.user_id)
            previous = user.avatar
            user.reset_avatar()
            users.flush()
            out = user_to_out(user, post_count=users.count_posts(user.id))

        self._discard_stored(previous)
        return out

    # ------------------------------------------------------------------ #
    # Management
    # ------------------------------------------------------------------ #

    def list_users(self, filters: UserListIn, pagination: Pagination) -> tuple[list[UserOut], int]:
        """Paginated accounts with their live post counts."""
        with self.ro_uow() as uow:
            users: UserRepository = uow.users
            page = users.search(
                pagination,
                search=filters.search,
                role=filters.role,
                is_active=filters.is_active,
            )
            counts = users.post_counts([u.id for u in page.items])
            items = [user_to_out(u, post_count=counts.get(u.id, 0)) for u in page.items]
            return items, page.total

    def get_user(self, user_id: str) -> UserOut:
        with self.ro_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise NotFoundError("user", user_id)
            return user_to_out(user, post_count=uow.users.count_posts(user.id))

    def create_user(self, dto: UserCreateIn) -> UserOut:
        """
        Create an account with an explicit role.

        :raises AuthorizationError: Caller is not a super admin.
        :raises ConflictError: Email or username already used.
        """
        self.authorize(
            Action.CREATE,
            ResourceRef(ResourceKind.USER),
            msg="you don't have permission to create user",
        )
        email = dto.email.strip().lower()
        password_hash = self.hasher.hash(dto.password)

        with self.rw_uow() as uow:
            users: UserRepository = uow.users
            if users.exists_by_email(email):
                raise ConflictError("user", "email already registered")
            if users.exists_by_username(dto.username):
                raise ConflictError("user", "username already taken")

            user = User(
                username=dto.username,
                email=email,
                password_hash=password_hash,
                full_name=dto.full_name or None,
                role=dto.role,
                is_active=True,
                avatar=dto.avatar or default_avatar_for(full_name=dto.full_name, email=email),
            )
            try:
                users.add(user)
            except IntegrityError as exc:
                conflict = user_conflict(exc)
                if conflict is None:
                    raise
                raise conflict from exc
            out = user_to_out(user)

        self.log.info(
            "user.created",
            extra=self.log_extra(user_id=out.id, role=out.role, actor_id=self.ctx.actor_id),
        )
        return out

    def update_user(self, user_id: str, dto: UserUpdateIn) -> UserOut:
        """
        Update another account (or one's own through the management API).

        Role and activation changes are reserved to super admins.

        :raises NotFoundError: Unknown user.
        :raises AuthorizationError: ``can_manage_user`` denies.
        :raises ConflictError: Email or username taken.
        """
        with self.rw_uow() as uow:
            users: UserRepository = uow.users
            user = self._load_for_update(users, user_id)
            self.authorize(
                Action.UPDATE,
                ResourceRef(ResourceKind.USER, owner_id=user.id),
                msg="you don't have permission to update this user",
            )
            privileged = dto.role is not None or dto.is_active is not None
            identity = self.require_identity()
            if privileged and not identity.is_super_admin:
                raise AuthorizationError("you don't have permission to update this user")

            updates: dict[str, object] = {}
            if dto.email:
                email = dto.email.strip().lower()
                if email != user.email:
                    if users.exists_by_email(email, exclude_id=user.id):
                        raise ConflictError("user", "email already registered")
                    updates["email"] = email
            if dto.username and dto.username != user.username:
                if users.exists_by_username(dto.username, exclude_id=user.id):
                    raise ConflictError("user", "username already taken")
                updates["username"] = dto.username
            if dto.full_name:
                updates["full_name"] = dto.full_name
            if dto.avatar:
                updates["avatar"] = dto.avatar
            if dto.role is not None:
                updates["role"] = dto.role
            if dto.is_active is not None:
                updates["is_active"] = dto.is_active
            if dto.password:
                user.password_hash = self.hasher.hash(dto.password)

            self._apply(users, user, updates)
            if dto.password or dto.is_active is False:
                uow.refresh_tokens.revoke_all_by_user(user.id)
            out = user_to_out(user, post_count=users.count_posts(user.id))

        self.log.info(
            "user.updated",
            extra=self.log_extra(
                user_id=out.id,
                actor_id=self.ctx.actor_id,
                fields=sorted(updates) + (["password"] if dto.password else []),
            ),
        )
        return out

    def delete_user(self, user_id: str) -> None:
        """
        Soft delete an account and revoke its refresh tokens.

        :raises NotFoundError: Unknown user.
        :raises AuthorizationError: Caller is not a super admin.
        :raises BusinessRuleError: Caller targets their own account.
        """
        with self.rw_uow() as uow:
            users: UserRepository = uow.users
            user = self._load_for_update(users, user_id)
            self.authorize(
                Action.DELETE,
                ResourceRef(ResourceKind.USER, owner_id=user.id),
                msg="you don't have permission to delete this user",
            )
            if user.id == self.ctx.actor_id:
                raise BusinessRuleError("cannot delete your own account")
            users.delete(user)
            revoked = uow.refresh_tokens.revoke_all_by_user(user.id)

        self.log.info(
            "user.deleted",
            extra=self.log_extra(user_id=user_id, actor_id=self.ctx.actor_id, sessions_revoked=revoked),
        )

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _load_for_update(users: UserRepository, user_id: str) -> User:
        user = users.get_for_update(user_id)
        if user is None:
            raise NotFoundError("user", user_id)
        return user

    def _apply(self, users: UserRepository, user: User, updates: dict[str, object]) -> None:
        try:
            users.assign_updates(user, updates)
        except IntegrityError as exc:
            conflict = user_conflict(exc)
            if conflict is None:
                raise
            raise conflict from exc

    def _discard_stored(self, url: str | None) -> None:
        """Delete a previously uploaded file; generated avatars are skipped."""
        path = self.storage.path_from_url(url) if url else None
        if not path:
            return
        try:
            self.storage.delete(path)
        except StorageError:
            self.log.warning("storage.delete_failed", extra=self.log_extra(path=path), exc_info=True)
