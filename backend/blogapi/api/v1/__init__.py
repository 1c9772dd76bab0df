"""API v1 blueprint package bundling versioned routes."""

from __future__ import annotations

from flask import Blueprint

API_VERSION = "v1"

# Import blueprints *only here* to keep imports localized and avoid cycles.
from .auth import bp as auth_bp  # noqa: E402
from .categories import bp as categories_bp  # noqa: E402
from .comments import bp as comments_bp  # noqa: E402
from .health import bp as health_bp  # noqa: E402
from .media import bp as media_bp  # noqa: E402
from .posts import bp as posts_bp  # noqa: E402
from .profile import bp as profile_bp  # noqa: E402
from .users import bp as users_bp  # noqa: E402

# Each tuple: (blueprint, url_prefix_relative_to_version)
REGISTRY: list[tuple[Blueprint, str]] = [
    (health_bp, ""),  # -> /api/v1
    (auth_bp, "/auth"),  # -> /api/v1/auth
    (profile_bp, "/profile"),
    (users_bp, "/users"),
    (categories_bp, "/categories"),
    (posts_bp, "/posts"),
    (comments_bp, "/comments"),
    (media_bp, "/media"),
]
