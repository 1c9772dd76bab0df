"""Service layer public API.

Callers import concrete services from their subpackages
(``blogapi.services.posts.service`` ...). This package only re-exports the
shared building blocks.

Re-exports
----------
- Base primitives (from ``blogapi.services._shared.base``)
    * :class:`BaseService`
    * :class:`ServiceContext`
- Request identity (from ``blogapi.services._shared.identity``)
    * :class:`RequestIdentity`
"""

from __future__ import annotations

from ._shared.base import BaseService, ServiceContext
from ._shared.identity import RequestIdentity

__all__ = [
    "BaseService",
    "ServiceContext",
    "RequestIdentity",
]
