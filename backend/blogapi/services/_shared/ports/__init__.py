"""
blogapi.services._shared.ports
==============================

*Ports* (hexagonal interfaces) the service layer depends on. Concrete
adapters live under ``blogapi.infra`` and are wired in
:mod:`blogapi.core.providers`.

Modules
-------
- :mod:`token_provider`: signed token issuing and verification.
- :mod:`password_hasher`: one-way password hashing.
- :mod:`denylist_store`: early revocation of access tokens by JTI.
- :mod:`storage`: blob storage for uploaded files.
- :mod:`image_processor`: upload validation and re-encoding.
- :mod:`sanitizer`: HTML cleaning for user content.
"""

from __future__ import annotations

from .denylist_store import InMemoryDenylistStore, TokenDenylistStore
from .image_processor import ImageProcessor, ProcessedImage
from .password_hasher import PasswordHasher
from .sanitizer import HTMLSanitizer
from .storage import FileStorage, StoredFile
from .token_provider import TokenProvider

__all__ = [
    "FileStorage",
    "HTMLSanitizer",
    "ImageProcessor",
    "InMemoryDenylistStore",
    "PasswordHasher",
    "ProcessedImage",
    "StoredFile",
    "TokenDenylistStore",
    "TokenProvider",
]
