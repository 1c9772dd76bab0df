"""Category catalogue: public reads, admin-managed writes."""

from __future__ import annotations

from sqlalchemy.exc import IntegrityError

from blogapi.models.base import as_utc
from blogapi.models.category import Category
from blogapi.repositories.base import Pagination
from blogapi.repositories.category import CategoryRepository
from blogapi.services._shared.base import BaseService
from blogapi.services._shared.errors import (
    BusinessRuleError,
    ConflictError,
    NotFoundError,
    violates,
)
from blogapi.services._shared.policies import Action, ResourceKind, ResourceRef

from .dto import CategoryCreateIn, CategoryOut, CategoryUpdateIn

CATEGORY = ResourceRef(ResourceKind.CATEGORY)


def category_to_out(row: Category, *, post_count: int = 0) -> CategoryOut:
    return CategoryOut(
        id=str(row.id),
        name=row.name,
        slug=row.slug,
        description=row.description,
        post_count=int(post_count),
        created_at=as_utc(row.created_at),
        updated_at=as_utc(row.updated_at),
    )


class CategoryService(BaseService):
    """Create, read, update and delete categories."""

    def list_categories(
        self, pagination: Pagination, *, search: str | None = None
    ) -> tuple[list[CategoryOut], int]:
        with self.ro_uow() as uow:
            repo: CategoryRepository = uow.categories
            page = repo.search(pagination, search=search)
            counts = repo.post_counts([c.id for c in page.items])
            items = [category_to_out(c, post_count=counts.get(c.id, 0)) for c in page.items]
            return items, page.total

    def get_category(self, category_id: str) -> CategoryOut:
        with self.ro_uow() as uow:
            row = uow.categories.get(category_id)
            if row is None:
                raise NotFoundError("category", category_id)
            return category_to_out(row, post_count=uow.categories.count_posts(row.id))

    def get_by_slug(self, slug: str) -> CategoryOut:
        with self.ro_uow() as uow:
            row = uow.categories.get_by_slug(slug)
            if row is None:
                raise NotFoundError("category", slug)
            return category_to_out(row, post_count=uow.categories.count_posts(row.id))

    def create_category(self, dto: CategoryCreateIn) -> CategoryOut:
        """
        :raises AuthorizationError: Caller is not an admin.
        :raises ConflictError: Slug already exists.
        """
        self.authorize(Action.CREATE, CATEGORY, msg="you don't have permission to create category")
        with self.rw_uow() as uow:
            repo: CategoryRepository = uow.categories
            if repo.slug_taken(dto.slug):
                raise ConflictError("category", "slug already exists")
            row = Category(name=dto.name, slug=dto.slug, description=dto.description)
            try:
                repo.add(row)
            except IntegrityError as exc:
                if violates(exc, "uq_categories_slug"):
                    raise ConflictError("category", "slug already exists") from exc
                raise
            out = category_to_out(row)

        self.log.info("category.created", extra=self.log_extra(category_id=out.id, slug=out.slug))
        return out

    def update_category(self, category_id: str, dto: CategoryUpdateIn) -> CategoryOut:
        with self.rw_uow() as uow:
            repo: CategoryRepository = uow.categories
            row = repo.get_for_update(category_id)
            if row is None:
                raise NotFoundError("category", category_id)
            self.authorize(
                Action.UPDATE, CATEGORY, msg="you don't have permission to update category"
            )

            updates: dict[str, object] = {}
            if dto.slug and dto.slug.strip().lower() != row.slug:
                if repo.slug_taken(dto.slug, exclude_id=row.id):
                    raise ConflictError("category", "slug already exists")
                updates["slug"] = dto.slug
            if dto.name:
                updates["name"] = dto.name
            if dto.description is not None:
                updates["description"] = dto.description
            repo.assign_updates(row, updates)
            out = category_to_out(row, post_count=repo.count_posts(row.id))

        self.log.info(
            "category.updated",
            extra=self.log_extra(category_id=out.id, fields=sorted(updates)),
        )
        return out

    def delete_category(self, category_id: str) -> None:
        """
        :raises BusinessRuleError: Category still has live posts.
        """
        with self.rw_uow() as uow:
            repo: CategoryRepository = uow.categories
            row = repo.get_for_update(category_id)
            if row is None:
                raise NotFoundError("category", category_id)
            self.authorize(
                Action.DELETE, CATEGORY, msg="you don't have permission to delete category"
            )
            if repo.count_posts(row.id) > 0:
                raise BusinessRuleError("cannot delete category with posts")
            repo.delete(row)

        self.log.info("category.deleted", extra=self.log_extra(category_id=category_id))
