"""Application-wide adapter instances (tokens, hashing, storage, images, HTML).

Adapters are built once from the Flask config by :func:`init_app` and kept
in ``app.extensions["providers"]``; the API layer hands them to services.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from flask import Flask, current_app

from blogapi.core.extensions import get_redis
from blogapi.infra.html.nh3_sanitizer import Nh3Sanitizer
from blogapi.infra.images.pillow_processor import PillowImageProcessor
from blogapi.infra.jwt.flask_jwt_token_provider import JWTTokenProvider
from blogapi.infra.redis.redis_denylist_store import RedisTokenDenylistStore
from blogapi.infra.security.bcrypt_hasher import BcryptPasswordHasher
from blogapi.infra.storage.local_storage import LocalFileStorage
from blogapi.services._shared.ports import (
    FileStorage,
    HTMLSanitizer,
    ImageProcessor,
    InMemoryDenylistStore,
    PasswordHasher,
    TokenDenylistStore,
    TokenProvider,
)

log = logging.getLogger(__name__)


@dataclass(slots=True)
class Providers:
    """Container of the adapters services depend on."""

    tokens: TokenProvider
    hasher: PasswordHasher
    denylist: TokenDenylistStore
    storage: FileStorage
    images: ImageProcessor
    sanitizer: HTMLSanitizer


def build_providers(app: Flask) -> Providers:
    """
    Build every adapter from ``app.config``.

    Parameters
    ----------
    app: flask.Flask
        Configured application. Redis must already be initialized by
        :func:`blogapi.core.extensions.init_app` when ``REDIS_URL`` is set.

    Returns
    -------
    Providers
        Fully wired adapter container.
    """
    cfg = app.config

    denylist: TokenDenylistStore
    if cfg.get("REDIS_URL"):
        denylist = RedisTokenDenylistStore(get_redis())
    else:
        denylist = InMemoryDenylistStore()

    return Providers(
        tokens=JWTTokenProvider(
            access_ttl=cfg["JWT_ACCESS_TOKEN_EXPIRES"],
            refresh_ttl=cfg["JWT_REFRESH_TOKEN_EXPIRES"],
        ),
        hasher=BcryptPasswordHasher(
            cost=int(cfg.get("BCRYPT_COST", 10)),
            min_length=int(cfg.get("PASSWORD_MIN_LENGTH", 6)),
            max_length=int(cfg.get("PASSWORD_MAX_LENGTH", 72)),
        ),
        denylist=denylist,
        storage=LocalFileStorage(cfg["STORAGE_BASE_PATH"], cfg["STORAGE_BASE_URL"]),
        images=PillowImageProcessor(
            max_size_bytes=int(cfg.get("STORAGE_MAX_SIZE_MB", 2)) * 1024 * 1024,
            max_width=int(cfg.get("IMAGE_MAX_WIDTH", 1920)),
            max_height=int(cfg.get("IMAGE_MAX_HEIGHT", 1080)),
            quality=int(cfg.get("IMAGE_QUALITY", 85)),
        ),
        sanitizer=Nh3Sanitizer(),
    )


def init_app(app: Flask) -> None:
    """Build the providers and register them on the app."""
    providers = build_providers(app)
    app.extensions["providers"] = providers
    log.debug(
        "providers.ready",
        extra={"denylist": type(providers.denylist).__name__},
    )


def get_providers(app: Flask | None = None) -> Providers:
    """Return the providers registered on ``app`` (defaults to ``current_app``)."""
    target = app or current_app
    providers = target.extensions.get("providers")
    if providers is None:
        raise RuntimeError("Providers are not initialized. Call init_app() first.")
    return providers
