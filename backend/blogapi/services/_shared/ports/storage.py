from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True, slots=True)
class StoredFile:
    """
    Result of a successful write.

    :param path: Storage-relative path (``media/<name>.jpg``).
    :param url: Public URL of the file.
    :param size: Bytes written.
    """

    path: str
    url: str
    size: int


class FileStorage(Protocol):
    """Port for a blob store addressed by relative paths."""

    def save(self, data: bytes, path: str) -> StoredFile: ...

    def delete(self, path: str) -> None: ...

    def exists(self, path: str) -> bool: ...

    def url_for(self, path: str) -> str: ...

    def path_from_url(self, url: str) -> str | None: ...
