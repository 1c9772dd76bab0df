from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from blogapi.models.post import Post, PostStatus
from blogapi.repositories.base import Pagination
from blogapi.repositories.post import PostRepository
from blogapi.services._shared.base import BaseService, ServiceContext
from blogapi.services._shared.errors import (
    BusinessRuleError,
    ConflictError,
    NotFoundError,
    violates,
)
from blogapi.services._shared.policies import (
    Action,
    ResourceKind,
    ResourceRef,
    can_view_post,
)
from blogapi.services._shared.ports import HTMLSanitizer

from ._converters import post_to_out
from .dto import PostCreateIn, PostListIn, PostOut, PostUpdateIn


class PostService(BaseService):
    """
    Post use cases with visibility and ownership rules.

    Visibility
    ----------
    - Anonymous callers see published posts only.
    - Authenticated non-admins also see their own drafts and archived posts.
    - Admins see everything.

    Hidden posts are reported as missing rather than forbidden.
    """

    def __init__(
        self,
        *,
        sanitizer: HTMLSanitizer,
        ctx: ServiceContext | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        super().__init__(ctx=ctx, logger=logger)
        self.sanitizer = sanitizer

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #

    def list_posts(self, filters: PostListIn, pagination: Pagination) -> tuple[list[PostOut], int]:
        identity = self.identity
        visibility: dict[str, object] = {}
        if identity is None:
            visibility["published_only"] = True
        elif not identity.is_admin:
            visibility["visible_to"] = identity.user_id

        with self.ro_uow() as uow:
            repo: PostRepository = uow.posts
            page = repo.search(
                pagination,
                search=filters.search,
                tag=filters.tag,
                filters={
                    "status": filters.status,
                    "category_id": filters.category_id,
                    "author_id": filters.author_id,
                },
                **visibility,
            )
            counts = uow.comments.counts_for_posts([p.id for p in page.items])
            items = [post_to_out(p, comment_count=counts.get(p.id, 0)) for p in page.items]
            return items, page.total

    def get_post(self, post_id: str) -> PostOut:
        with self.ro_uow() as uow:
            post = self._visible(uow.posts.get(post_id), key=post_id)
            return post_to_out(post, comment_count=uow.comments.count_for_post(post.id))

    def get_by_slug(self, slug: str) -> PostOut:
        with self.ro_uow() as uow:
            post = self._visible(uow.posts.get_by_slug(slug), key=slug)
            return post_to_out(post, comment_count=uow.comments.count_for_post(post.id))

    def increment_views(self, post_id: str) -> None:
        """Atomically add one view. Unknown posts raise :class:`NotFoundError`."""
        with self.rw_uow() as uow:
            if not uow.posts.increment_views(post_id):
                raise NotFoundError("post", post_id)

    # ------------------------------------------------------------------ #
    # Commands
    # ------------------------------------------------------------------ #

    def create_post(self, dto: PostCreateIn) -> PostOut:
        """
        Create a post authored by the caller.

        :raises NotFoundError: Unknown category.
        :raises ConflictError: Slug already exists.
        """
        identity = self.require_identity()
        self.authorize(
            Action.CREATE,
            ResourceRef(ResourceKind.POST, owner_id=identity.user_id),
            msg="you don't have permission to create post",
        )

        with self.rw_uow() as uow:
            repo: PostRepository = uow.posts
            if uow.categories.get(dto.category_id) is None:
                raise NotFoundError("category", dto.category_id)
            if repo.slug_taken(dto.slug):
                raise ConflictError("post", "slug already exists")

            post = Post(
                title=dto.title,
                slug=dto.slug,
                content=self.sanitizer.sanitize_ugc(dto.content),
                excerpt=dto.excerpt,
                featured_image=dto.featured_image,
                tags=list(dto.tags),
                status=PostStatus.DRAFT,
                view_count=0,
                author_id=identity.user_id,
                category_id=dto.category_id,
            )
            post.change_status(dto.status)
            self._add(repo, post)
            out = post_to_out(post)

        self.log.info(
            "post.created",
            extra=self.log_extra(post_id=out.id, author_id=out.author_id, status=out.status),
        )
        return out

    def update_post(self, post_id: str, dto: PostUpdateIn) -> PostOut:
        """
        Update a post (owner or admin).

        ``published_at`` is stamped only on the first transition into
        ``published``.
        """
        with self.rw_uow() as uow:
            repo: PostRepository = uow.posts
            post = self._load_for_update(repo, post_id)
            self.authorize(
                Action.UPDATE,
                ResourceRef(ResourceKind.POST, owner_id=post.author_id),
                msg="you don't have permission to update this post",
            )

            if dto.category_id is not None and dto.category_id != post.category_id:
                category = uow.categories.get(dto.category_id)
                if category is None:
                    raise NotFoundError("category", dto.category_id)
                post.category = category

            updates: dict[str, object] = {}
            if dto.slug and dto.slug.strip().lower() != post.slug:
                if repo.slug_taken(dto.slug, exclude_id=post.id):
                    raise ConflictError("post", "slug already exists")
                updates["slug"] = dto.slug
            if dto.title:
                updates["title"] = dto.title
            if dto.content:
                updates["content"] = self.sanitizer.sanitize_ugc(dto.content)
            if dto.excerpt:
                updates["excerpt"] = dto.excerpt
            if dto.featured_image:
                updates["featured_image"] = dto.featured_image
            if dto.tags:
                updates["tags"] = list(dto.tags)
            if dto.status is not None:
                post.change_status(dto.status)

            try:
                repo.assign_updates(post, updates)
            except IntegrityError as exc:
                if violates(exc, "uq_posts_slug"):
                    raise ConflictError("post", "slug already exists") from exc
                raise
            out = post_to_out(post, comment_count=uow.comments.count_for_post(post.id))

        self.log.info(
            "post.updated",
            extra=self.log_extra(post_id=out.id, actor_id=self.ctx.actor_id, status=out.status),
        )
        return out

    def delete_post(self, post_id: str) -> None:
        with self.rw_uow() as uow:
            repo: PostRepository = uow.posts
            post = self._load_for_update(repo, post_id)
            self.authorize(
                Action.DELETE,
                ResourceRef(ResourceKind.POST, owner_id=post.author_id),
                msg="you don't have permission to delete this post",
            )
            repo.delete(post)

        self.log.info(
            "post.deleted", extra=self.log_extra(post_id=post_id, actor_id=self.ctx.actor_id)
        )

    def publish(self, post_id: str) -> PostOut:
        """
        :raises AuthorizationError: Caller is not an admin.
        :raises BusinessRuleError: Post is already published.
        """
        return self._transition(post_id, Action.PUBLISH)

    def unpublish(self, post_id: str) -> PostOut:
        """
        Move a published post back to ``draft``; ``published_at`` is kept.

        :raises BusinessRuleError: Post is not published.
        """
        return self._transition(post_id, Action.UNPUBLISH)

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    def _transition(self, post_id: str, action: Action) -> PostOut:
        with self.rw_uow() as uow:
            repo: PostRepository = uow.posts
            post = self._load_for_update(repo, post_id)
            self.authorize(
                action,
                ResourceRef(ResourceKind.POST, owner_id=post.author_id),
                msg=f"you don't have permission to {action.value} this post",
            )
            try:
                if action is Action.PUBLISH:
                    post.publish()
                else:
                    post.unpublish()
            except ValueError as exc:
                raise BusinessRuleError(str(exc)) from exc
            repo.flush()
            out = post_to_out(post, comment_count=uow.comments.count_for_post(post.id))

        self.log.info(
            f"post.{action.value}ed",
            extra=self.log_extra(
                post_id=out.id,
                actor_id=self.ctx.actor_id,
                published_at=out.published_at.isoformat() if out.published_at else None,
            ),
        )
        return out

    def _visible(self, post: Post | None, *, key: str) -> Post:
        if post is None or not can_view_post(self.identity, post):
            raise NotFoundError("post", key)
        return post

    @staticmethod
    def _load_for_update(repo: PostRepository, post_id: str) -> Post:
        post = repo.get_for_update(post_id)
        if post is None:
            raise NotFoundError("post", post_id)
        return post

    @staticmethod
    def _add(repo: PostRepository, post: Post) -> None:
        try:
            repo.add(post)
        except IntegrityError as exc:
            if violates(exc, "uq_posts_slug"):
                raise ConflictError("post", "slug already exists") from exc
            raise
