"""Shared API helpers for request parsing, service wiring and timing."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar

from flask import Response, current_app, g, jsonify, request

from blogapi.core.logger import ensure_request_id, get_logger
from blogapi.core.providers import get_providers
from blogapi.repositories.base import Pagination
from blogapi.schemas.common import PaginationQuerySchema, build_meta
from blogapi.services._shared.base import ServiceContext
from blogapi.services.auth.service import AuthService
from blogapi.services.categories.service import CategoryService
from blogapi.services.comments.service import CommentService
from blogapi.services.media.service import MediaService
from blogapi.services.posts.service import PostService
from blogapi.services.users.service import UserService

F = TypeVar("F", bound=Callable[..., Any])


def parse_pagination(default_limit: int = 10, max_limit: int = 100) -> Pagination:
    """Parse pagination parameters from ``request.args`` using Marshmallow."""

    schema = PaginationQuerySchema(default_limit=default_limit, max_limit=max_limit)
    data = schema.load(request.args)
    return Pagination(page=data["page"], limit=data["limit"], sort=data["sort"])


def service_context() -> ServiceContext:
    """Build the request context handed to services.

    The identity is whatever the authentication gate stored on ``g``
    (``None`` for anonymous requests).
    """

    return ServiceContext(identity=g.get("identity"), request_id=ensure_request_id())


# ------------------------------ Service builders ------------------------------


def auth_service() -> AuthService:
    providers = get_providers()
    return AuthService(
        token_provider=providers.tokens,
        password_hasher=providers.hasher,
        denylist_store=providers.denylist,
        identity_claim=current_app.config.get("JWT_IDENTITY_CLAIM", "user_id"),
        ctx=service_context(),
        logger=get_logger(current_app),
    )


def user_service() -> UserService:
    providers = get_providers()
    return UserService(
        password_hasher=providers.hasher,
        storage=providers.storage,
        image_processor=providers.images,
        ctx=service_context(),
        logger=get_logger(current_app),
    )


def category_service() -> CategoryService:
    return CategoryService(ctx=service_context(), logger=get_logger(current_app))


def post_service() -> PostService:
    return PostService(
        sanitizer=get_providers().sanitizer,
        ctx=service_context(),
        logger=get_logger(current_app),
    )


def comment_service() -> CommentService:
    return CommentService(
        sanitizer=get_providers().sanitizer,
        ctx=service_context(),
        logger=get_logger(current_app),
    )


def media_service() -> MediaService:
    providers = get_providers()
    return MediaService(
        storage=providers.storage,
        image_processor=providers.images,
        ctx=service_context(),
        logger=get_logger(current_app),
    )


# --------------------------------- Responses ----------------------------------


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def page_response(data: Any, *, total: int, pagination: Pagination) -> Response:
    """``{"data": [...], "meta": {...}}`` for paginated listings."""

    meta = build_meta(total=total, page=pagination.page, limit=pagination.limit)
    return json_response({"data": data, "meta": meta})


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
