"""Category endpoints: public reads, admin writes."""

from __future__ import annotations

from flask import Blueprint, request

from blogapi.api.deps import (
    category_service,
    json_response,
    page_response,
    parse_pagination,
    timing,
)
from blogapi.api.gate import require_admin
from blogapi.schemas import CategoryCreateSchema, CategorySchema, CategoryUpdateSchema
from blogapi.schemas.category import CategoryFilterSchema

bp = Blueprint("categories", __name__, url_prefix="/categories")

category_schema = CategorySchema()
category_list_schema = CategorySchema(many=True)
category_create_schema = CategoryCreateSchema()
category_update_schema = CategoryUpdateSchema()
category_filter_schema = CategoryFilterSchema()


@bp.get("")
@timing
def list_categories():
    """Return paginated categories with their post counts."""

    filters = category_filter_schema.load(request.args)
    pagination = parse_pagination()
    items, total = category_service().list_categories(pagination, search=filters["search"])
    return page_response(category_list_schema.dump(items), total=total, pagination=pagination)


@bp.get("/<string:category_id>")
@timing
def get_category(category_id: str):
    category = category_service().get_category(category_id)
    return json_response({"data": category_schema.dump(category)})


@bp.get("/slug/<string:slug>")
@timing
def get_category_by_slug(slug: str):
    category = category_service().get_by_slug(slug)
    return json_response({"data": category_schema.dump(category)})


@bp.post("")
@require_admin
@timing
def create_category():
    dto = category_create_schema.load(request.get_json(silent=True) or {})
    category = category_service().create_category(dto)
    return json_response({"data": category_schema.dump(category)}, status=201)


@bp.put("/<string:category_id>")
@require_admin
@timing
def update_category(category_id: str):
    dto = category_update_schema.load(request.get_json(silent=True) or {})
    category = category_service().update_category(category_id, dto)
    return json_response({"data": category_schema.dump(category)})


@bp.delete("/<string:category_id>")
@require_admin
@timing
def delete_category(category_id: str):
    """Delete a category; refused while posts still reference it."""

    category_service().delete_category(category_id)
    return json_response({"message": "category deleted successfully"})
