"""Request authentication gate.

Two layers guard ``/api/v1``:

1. A service-level API key (``X-API-KEY``) checked before every request,
   except the health probe and CORS preflights.
2. Per-endpoint bearer authentication through :func:`require_auth`,
   :func:`optional_auth` and the role decorators. The resolved
   :class:`~blogapi.services._shared.identity.RequestIdentity` is stored on
   ``flask.g.identity`` and handed to services explicitly.
"""

from __future__ import annotations

import functools
import hmac
from collections.abc import Callable
from typing import Any, TypeVar

from flask import Flask, current_app, g, request

from blogapi.api import deps
from blogapi.core.errors import Forbidden, Unauthorized
from blogapi.models.user import Role
from blogapi.services._shared.errors import AuthenticationError
from blogapi.services._shared.identity import RequestIdentity

F = TypeVar("F", bound=Callable[..., Any])

API_KEY_HEADER = "X-API-KEY"
PUBLIC_PATHS = ("/health",)


def bearer_token() -> str:
    """Extract the token from ``Authorization: Bearer <token>``.

    :raises Unauthorized: Header missing or not a bearer credential.
    """
    header = request.headers.get("Authorization")
    if not header:
        raise Unauthorized("authorization header is required")
    scheme, sep, token = header.partition(" ")
    if not sep or scheme != "Bearer":
        raise Unauthorized("invalid authorization header format")
    return token


def authenticate() -> RequestIdentity:
    """Resolve the caller identity and store it on ``g.identity``.

    :raises Unauthorized: For every failure state of the gate.
    """
    g.identity = None
    token = bearer_token()
    try:
        identity = deps.auth_service().resolve_identity(token)
    except AuthenticationError as exc:
        raise Unauthorized(str(exc)) from exc
    g.identity = identity
    return identity


def current_identity() -> RequestIdentity | None:
    return g.get("identity")


def require_auth(func: F) -> F:
    """Reject the request unless it carries a valid access token."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        authenticate()
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def optional_auth(func: F) -> F:
    """Authenticate when possible; any failure continues anonymously."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        try:
            authenticate()
        except Unauthorized:
            g.identity = None
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def require_role(role: Role) -> Callable[[F], F]:
    """Require an authenticated caller whose role ranks at least ``role``."""

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any):
            identity = authenticate()
            if not identity.role.at_least(role):
                raise Forbidden("you don't have permission to access this resource")
            return func(*args, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator


require_admin = require_role(Role.ADMIN)
require_super_admin = require_role(Role.SUPER_ADMIN)


def _is_public(path: str, version_prefix: str) -> bool:
    if not path.startswith(version_prefix):
        return True
    relative = path[len(version_prefix):].rstrip("/")
    return relative in PUBLIC_PATHS


def init_app(app: Flask, *, version_prefix: str | None = None) -> None:
    """Install the API-key check for every versioned API route."""

    prefix = version_prefix or f"{app.config.get('API_BASE_PREFIX', '/api')}/v1"

    @app.before_request
    def _check_api_key() -> None:
        g.identity = None
        if request.method == "OPTIONS" or _is_public(request.path, prefix):
            return None
        provided = request.headers.get(API_KEY_HEADER)
        if not provided:
            raise Unauthorized("API Key is required")
        expected = str(current_app.config.get("API_KEY") or "")
        if not hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8")):
            raise Unauthorized("Invalid API KEY")
        return None


__all__ = [
    "API_KEY_HEADER",
    "authenticate",
    "bearer_token",
    "current_identity",
    "init_app",
    "optional_auth",
    "require_admin",
    "require_auth",
    "require_role",
    "require_super_admin",
]
