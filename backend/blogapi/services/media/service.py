"""
MediaService
============

Image uploads and their metadata.

Uploaded bytes are validated, resized and re-encoded before they reach
storage. A file is never left behind without its row: when the insert
fails the stored file is removed again.
"""

from __future__ import annotations

import logging
from uuid import uuid4

from blogapi.models.base import as_utc
from blogapi.models.media import Media, MediaType
from blogapi.models.post import Post
from blogapi.repositories.base import Pagination
from blogapi.repositories.media import MediaRepository
from blogapi.services._shared.base import BaseService, ServiceContext
from blogapi.services._shared.errors import AuthorizationError, NotFoundError, StorageError
from blogapi.services._shared.files import stored_file
from blogapi.services._shared.policies import (
    Action,
    ResourceKind,
    ResourceRef,
    can_view_post,
    can_view_user_media,
)
from blogapi.services._shared.ports import FileStorage, ImageProcessor

from .dto import MediaListIn, MediaOut, MediaUpdateIn, MediaUploadIn

MEDIA_DIR = "media"


def media_to_out(row: Media) -> MediaOut:
    return MediaOut(
        id=str(row.id),
        filename=row.filename,
        original_name=row.original_name,
        mime_type=row.mime_type,
        url=row.url,
        size=int(row.size),
        width=row.width,
        height=row.height,
        alt_text=row.alt_text,
        description=row.description,
        media_type=getattr(row.media_type, "value", row.media_type),
        post_id=str(row.post_id) if row.post_id else None,
        user_id=str(row.user_id),
        is_featured=bool(row.is_featured),
        created_at=as_utc(row.created_at),
        updated_at=as_utc(row.updated_at),
    )


class MediaService(BaseService):
    """Upload, list, update and delete media items."""

    def __init__(
        self,
        *,
        storage: FileStorage,
        image_processor: ImageProcessor,
        ctx: ServiceContext | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        super().__init__(ctx=ctx, logger=logger)
        self.storage = storage
        self.images = image_processor

    # ------------------------------------------------------------------ #
    # Commands
    # ------------------------------------------------------------------ #

    def upload(self, dto: MediaUploadIn) -> MediaOut:
        """
        Validate, process and store an image, then record it.

        :param dto: Upload payload.
        :raises BusinessRuleError: Unsupported type, oversized or undecodable file.
        :raises NotFoundError: ``post_id`` does not exist.
        """
        identity = self.require_identity()
        self.authorize(
            Action.CREATE,
            ResourceRef(ResourceKind.MEDIA, owner_id=identity.user_id),
            msg="you don't have permission to upload media",
        )
        self.images.validate(filename=dto.filename, content_type=dto.content_type, size=len(dto.data))

        if dto.post_id:
            with self.ro_uow() as uow:
                if uow.posts.get(dto.post_id) is None:
                    raise NotFoundError("post", dto.post_id)

        processed = self.images.process(dto.data)
        filename = f"{uuid4()}.{processed.extension}"
        path = f"{MEDIA_DIR}/{filename}"

        with stored_file(self.storage, processed.data, path, logger=self.log) as stored:
            with self.rw_uow() as uow:
                repo: MediaRepository = uow.media
                row = Media(
                    filename=filename,
                    original_name=dto.filename,
                    mime_type=processed.mime_type,
                    path=stored.path,
                    url=stored.url,
                    size=stored.size,
                    width=processed.width,
                    height=processed.height,
                    alt_text=dto.alt_text or None,
                    description=dto.description or None,
                    media_type=MediaType.IMAGE,
                    post_id=dto.post_id or None,
                    user_id=identity.user_id,
                    is_featured=bool(dto.is_featured and dto.post_id),
                )
                repo.add(row)
                if row.is_featured and row.post_id:
                    repo.clear_featured(row.post_id, keep_id=row.id)
                out = media_to_out(row)

        self.log.info(
            "media.uploaded",
            extra=self.log_extra(
                media_id=out.id, user_id=out.user_id, post_id=out.post_id, size=out.size
            ),
        )
        return out

    def update_media(self, media_id: str, dto: MediaUpdateIn) -> MediaOut:
        """
        Update metadata of a media item (owner or admin).

        Marking an item featured clears the flag on the post's other items.
        """
        with self.rw_uow() as uow:
            repo: MediaRepository = uow.media
            row = self._load_for_update(repo, media_id)
            self.authorize(
                Action.UPDATE,
                ResourceRef(ResourceKind.MEDIA, owner_id=row.user_id),
                msg="you don't have permission to update this media",
            )
            if dto.post_id and dto.post_id != row.post_id:
                if uow.posts.get(dto.post_id) is None:
                    raise NotFoundError("post", dto.post_id)

            updates: dict[str, object] = {}
            if dto.alt_text is not None:
                updates["alt_text"] = dto.alt_text
            if dto.description is not None:
                updates["description"] = dto.description
            if dto.post_id:
                updates["post_id"] = dto.post_id
            if dto.is_featured is not None:
                updates["is_featured"] = dto.is_featured
            repo.assign_updates(row, updates)

            if row.is_featured and row.post_id:
                repo.clear_featured(row.post_id, keep_id=row.id)
            out = media_to_out(row)

        self.log.info(
            "media.updated",
            extra=self.log_extra(media_id=out.id, actor_id=self.ctx.actor_id, fields=sorted(updates)),
        )
        return out

    def delete_media(self, media_id: str) -> None:
        """Soft delete the row, then remove the stored file."""
        with self.rw_uow() as uow:
            repo: MediaRepository = uow.media
            row = self._load_for_update(repo, media_id)
            self.authorize(
                Action.DELETE,
                ResourceRef(ResourceKind.MEDIA, owner_id=row.user_id),
                msg="you don't have permission to delete this media",
            )
            path = row.path
            repo.delete(row)

        try:
            self.storage.delete(path)
        except StorageError:
            self.log.warning(
                "storage.delete_failed", extra=self.log_extra(path=path), exc_info=True
            )
        self.log.info(
            "media.deleted", extra=self.log_extra(media_id=media_id, actor_id=self.ctx.actor_id)
        )

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #

    def list_media(self, filters: MediaListIn, pagination: Pagination) -> tuple[list[MediaOut], int]:
        """
        Paginated media listing.

        Non-admins only see their own uploads: without a ``user_id`` filter
        the listing is scoped to the caller.

        :raises AuthorizationError: A non-admin asks for another user's media.
        """
        identity = self.require_identity()
        user_id = filters.user_id
        if user_id is None and not identity.is_admin:
            user_id = identity.user_id
        if user_id is not None and not can_view_user_media(identity, user_id):
            raise AuthorizationError("you can only view your own media")

        with self.ro_uow() as uow:
            page = uow.media.paginate(
                pagination,
                filters={
                    "user_id": user_id,
                    "post_id": filters.post_id,
                    "is_featured": filters.is_featured,
                    "media_type": MediaType(filters.media_type) if filters.media_type else None,
                },
            )
            return [media_to_out(m) for m in page.items], page.total

    def get_media(self, media_id: str) -> MediaOut:
        with self.ro_uow() as uow:
            row = uow.media.get(media_id)
            if row is None:
                raise NotFoundError("media", media_id)
            return media_to_out(row)

    def list_for_post(self, post_id: str) -> list[MediaOut]:
        """All media attached to a visible post, oldest first."""
        with self.ro_uow() as uow:
            self._ensure_post_visible(uow.posts.get(post_id), post_id)
            return [media_to_out(m) for m in uow.media.for_post(post_id)]

    def featured_for_post(self, post_id: str) -> MediaOut:
        with self.ro_uow() as uow:
            self._ensure_post_visible(uow.posts.get(post_id), post_id)
            row = uow.media.featured_for_post(post_id)
            if row is None:
                raise NotFoundError("featured media", post_id)
            return media_to_out(row)

    def _ensure_post_visible(self, post: Post | None, post_id: str) -> None:
        # Hidden posts answer 404 like PostService does.
        if post is None or not can_view_post(self.identity, post):
            raise NotFoundError("post", post_id)

    @staticmethod
    def _load_for_update(repo: MediaRepository, media_id: str) -> Media:
        row = repo.get_for_update(media_id)
        if row is None:
            raise NotFoundError("media", media_id)
        return row
