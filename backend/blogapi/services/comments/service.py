"""Comment threads: top-level comments with one level of nested replies."""

from __future__ import annotations

import logging

from blogapi.models.base import as_utc
from blogapi.models.comment import Comment
from blogapi.repositories.base import Pagination
from blogapi.repositories.comment import CommentRepository
from blogapi.services._shared.base import BaseService, ServiceContext
from blogapi.services._shared.errors import BusinessRuleError, NotFoundError
from blogapi.services._shared.policies import (
    Action,
    ResourceKind,
    ResourceRef,
    can_view_post,
)
from blogapi.services._shared.ports import HTMLSanitizer

from .dto import CommentAuthorOut, CommentCreateIn, CommentOut, CommentUpdateIn


def comment_to_out(row: Comment, *, replies: list[Comment] | None = None) -> CommentOut:
    user = row.user
    return CommentOut(
        id=str(row.id),
        content=row.content,
        post_id=str(row.post_id),
        user_id=str(row.user_id),
        parent_id=str(row.parent_id) if row.parent_id else None,
        author=CommentAuthorOut(
            id=str(user.id),
            username=user.username,
            full_name=user.full_name,
            avatar=user.avatar,
        ),
        created_at=as_utc(row.created_at),
        updated_at=as_utc(row.updated_at),
        replies=[comment_to_out(r) for r in replies or []],
    )


class CommentService(BaseService):
    """Read and write comments on visible posts."""

    def __init__(
        self,
        *,
        sanitizer: HTMLSanitizer,
        ctx: ServiceContext | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        super().__init__(ctx=ctx, logger=logger)
        self.sanitizer = sanitizer

    def list_for_post(self, post_id: str, pagination: Pagination) -> tuple[list[CommentOut], int]:
        """Top-level comments of a post, each with its replies (oldest first)."""
        with self.ro_uow() as uow:
            self._visible_post(uow, post_id)
            repo: CommentRepository = uow.comments
            page = repo.top_level_for_post(post_id, pagination)
            replies = repo.replies_for([c.id for c in page.items])
            items = [comment_to_out(c, replies=replies.get(c.id, [])) for c in page.items]
            return items, page.total

    def create_comment(self, post_id: str, dto: CommentCreateIn) -> CommentOut:
        """
        :raises NotFoundError: Unknown post or parent comment.
        :raises BusinessRuleError: Parent belongs to another post, or the
            content is empty once tags are stripped.
        """
        identity = self.require_identity()
        self.authorize(
            Action.CREATE,
            ResourceRef(ResourceKind.COMMENT, owner_id=identity.user_id),
            msg="you don't have permission to create comment",
        )
        content = self._clean(dto.content)

        with self.rw_uow() as uow:
            self._visible_post(uow, post_id)
            repo: CommentRepository = uow.comments
            if dto.parent_id:
                parent = repo.get(dto.parent_id)
                if parent is None:
                    raise NotFoundError("parent comment", dto.parent_id)
                if parent.post_id != post_id:
                    raise BusinessRuleError("parent comment does not belong to this post")

            row = Comment(
                content=content,
                post_id=post_id,
                user_id=identity.user_id,
                parent_id=dto.parent_id or None,
            )
            repo.add(row)
            out = comment_to_out(row)

        self.log.info(
            "comment.created",
            extra=self.log_extra(comment_id=out.id, post_id=post_id, parent_id=out.parent_id),
        )
        return out

    def update_comment(self, comment_id: str, dto: CommentUpdateIn) -> CommentOut:
        with self.rw_uow() as uow:
            repo: CommentRepository = uow.comments
            row = self._load_for_update(repo, comment_id)
            self.authorize(
                Action.UPDATE,
                ResourceRef(ResourceKind.COMMENT, owner_id=row.user_id),
                msg="you don't have permission to update this comment",
            )
            repo.assign_updates(row, {"content": self._clean(dto.content)})
            out = comment_to_out(row)

        self.log.info("comment.updated", extra=self.log_extra(comment_id=out.id))
        return out

    def delete_comment(self, comment_id: str) -> None:
        with self.rw_uow() as uow:
            repo: CommentRepository = uow.comments
            row = self._load_for_update(repo, comment_id)
            self.authorize(
                Action.DELETE,
                ResourceRef(ResourceKind.COMMENT, owner_id=row.user_id),
                msg="you don't have permission to delete this comment",
            )
            repo.delete(row)

        self.log.info(
            "comment.deleted",
            extra=self.log_extra(comment_id=comment_id, actor_id=self.ctx.actor_id),
        )

    # ------------------------------------------------------------------ #

    def _clean(self, content: str) -> str:
        cleaned = self.sanitizer.strip_tags(content or "").strip()
        if not cleaned:
            raise BusinessRuleError("comment content is required")
        return cleaned

    def _visible_post(self, uow, post_id: str) -> None:
        post = uow.posts.get(post_id)
        if post is None or not can_view_post(self.identity, post):
            raise NotFoundError("post", post_id)

    @staticmethod
    def _load_for_update(repo: CommentRepository, comment_id: str) -> Comment:
        row = repo.get_for_update(comment_id)
        if row is None:
            raise NotFoundError("comment", comment_id)
        return row
