"""Idempotent database seed helpers for local development environments."""

from __future__ import annotations

import logging
import os
from typing import Any, TypeVar, cast

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import select
from sqlalchemy.orm import Session

from blogapi.models.category import Category
from blogapi.models.post import Post, PostStatus
from blogapi.models.user import Role, User, default_avatar_for
from blogapi.services._shared.ports import PasswordHasher

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

USER_FIXTURES: list[dict[str, Any]] = [
    {
        "email": os.getenv("SEED_ADMIN_EMAIL", "admin@example.com"),
        "username": "superadmin",
        "full_name": "Super Admin",
        "password": os.getenv("SEED_ADMIN_PASSWORD", "adminPass123"),
        "role": Role.SUPER_ADMIN,
    },
    {
        "email": "editor@example.com",
        "username": "editor",
        "full_name": "Eddie Editor",
        "password": "editorPass123",
        "role": Role.ADMIN,
    },
    {
        "email": "writer@example.com",
        "username": "writer",
        "full_name": "Wendy Writer",
        "password": "writerPass123",
        "role": Role.USER,
    },
]

CATEGORY_FIXTURES: list[dict[str, str]] = [
    {"slug": "technology", "name": "Technology", "description": "Software, hardware and the web."},
    {"slug": "lifestyle", "name": "Lifestyle", "description": "Everyday life, habits and travel."},
    {"slug": "tutorials", "name": "Tutorials", "description": "Step-by-step guides."},
    {"slug": "news", "name": "News", "description": "Announcements and updates."},
]

POST_FIXTURES: list[dict[str, Any]] = [
    {
        "slug": "welcome-to-the-blog",
        "title": "Welcome to the blog",
        "content": "<p>This is the first post. Edit or delete it, then start writing!</p>",
        "excerpt": "The very first post.",
        "tags": ["welcome", "news"],
        "category_slug": "news",
        "author_email": "writer@example.com",
        "status": PostStatus.PUBLISHED,
    },
    {
        "slug": "draft-ideas-for-later",
        "title": "Draft ideas for later",
        "content": "<p>Notes that are not ready to be published yet.</p>",
        "excerpt": None,
        "tags": ["ideas"],
        "category_slug": "lifestyle",
        "author_email": "writer@example.com",
        "status": PostStatus.DRAFT,
    },
]


def _session(database: SQLAlchemy) -> Session:
    """Return the current SQLAlchemy session."""
    return cast(Session, database.session)


def _touch(summary: dict[str, dict[str, int]], table: str, created: bool) -> None:
    """Update summary counters for the given table."""
    entry = summary.setdefault(table, {"created": 0, "existing": 0})
    if created:
        entry["created"] += 1
    else:
        entry["existing"] += 1


def _get_or_create(
    session: Session,
    model: type[T],
    *,
    defaults: dict[str, Any] | None = None,
    **filters: Any,
) -> tuple[T, bool]:
    """Fetch ``model`` by ``filters`` or create it using ``defaults``."""
    instance = session.execute(select(model).filter_by(**filters)).scalar_one_or_none()
    if instance is not None:
        return instance, False
    params = dict(defaults or {})
    params.update(filters)
    instance = cast(T, model(**params))
    session.add(instance)
    return instance, True


def seed_users(
    database: SQLAlchemy, *, hasher: PasswordHasher, verbose: bool = False
) -> dict[str, dict[str, int]]:
    """Create the super admin and sample accounts; existing passwords are kept."""
    if verbose:
        LOGGER.info("Seeding users...")
    session = _session(database)
    summary: dict[str, dict[str, int]] = {}

    for fixture in USER_FIXTURES:
        email = str(fixture["email"]).strip().lower()
        user = session.execute(select(User).filter_by(email=email)).scalar_one_or_none()
        created = False
        if user is None:
            user = User(
                email=email,
                username=str(fixture["username"]),
                full_name=fixture.get("full_name"),
                password_hash=hasher.hash(str(fixture["password"])),
                role=fixture["role"],
                is_active=True,
                avatar=default_avatar_for(full_name=fixture.get("full_name"), email=email),
            )
            session.add(user)
            created = True
        else:
            user.role = fixture["role"]
            user.is_active = True
        session.flush()
        _touch(summary, "users", created)
    return summary


def seed_categories(database: SQLAlchemy, *, verbose: bool = False) -> dict[str, dict[str, int]]:
    """Create the default categories."""
    if verbose:
        LOGGER.info("Seeding categories...")
    session = _session(database)
    summary: dict[str, dict[str, int]] = {}
    for fixture in CATEGORY_FIXTURES:
        _, created = _get_or_create(
            session,
            Category,
            defaults={"name": fixture["name"], "description": fixture["description"]},
            slug=fixture["slug"],
        )
        session.flush()
        _touch(summary, "categories", created)
    return summary


def seed_posts(database: SQLAlchemy, *, verbose: bool = False) -> dict[str, dict[str, int]]:
    """Create a couple of sample posts owned by the sample writer."""
    if verbose:
        LOGGER.info("Seeding posts...")
    session = _session(database)
    summary: dict[str, dict[str, int]] = {}
    for fixture in POST_FIXTURES:
        author = session.execute(
            select(User).filter_by(email=fixture["author_email"])
        ).scalar_one_or_none()
        category = session.execute(
            select(Category).filter_by(slug=fixture["category_slug"])
        ).scalar_one_or_none()
        if author is None or category is None:
            raise RuntimeError(f"Missing author or category for post {fixture['slug']}")

        post = session.execute(select(Post).filter_by(slug=fixture["slug"])).scalar_one_or_none()
        created = post is None
        if post is None:
            post = Post(
                slug=fixture["slug"],
                title=fixture["title"],
                content=fixture["content"],
                excerpt=fixture["excerpt"],
                tags=list(fixture["tags"]),
                status=PostStatus.DRAFT,
                view_count=0,
                author_id=author.id,
                category_id=category.id,
            )
            post.change_status(fixture["status"])
            session.add(post)
        session.flush()
        _touch(summary, "posts", created)
    return summary


def run_all(
    database: SQLAlchemy, *, hasher: PasswordHasher, verbose: bool = False
) -> dict[str, dict[str, int]]:
    """Run all seeders in foreign-key order inside one transaction."""
    if verbose:
        LOGGER.info("Running full seed pipeline...")
    session = _session(database)
    combined: dict[str, dict[str, int]] = {}
    results = [
        seed_users(database, hasher=hasher, verbose=verbose),
        seed_categories(database, verbose=verbose),
        seed_posts(database, verbose=verbose),
    ]
    session.commit()
    for result in results:
        for table, counters in result.items():
            entry = combined.setdefault(table, {"created": 0, "existing": 0})
            entry["created"] += counters.get("created", 0)
            entry["existing"] += counters.get("existing", 0)
    return combined


__all__ = [
    "seed_categories",
    "seed_posts",
    "seed_users",
    "run_all",
]
