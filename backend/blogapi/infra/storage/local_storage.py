"""Filesystem-backed file storage."""

from __future__ import annotations

import logging
import os
from pathlib import Path, PurePosixPath

from blogapi.services._shared.errors import StorageError
from blogapi.services._shared.ports import FileStorage, StoredFile

log = logging.getLogger(__name__)


class LocalFileStorage(FileStorage):
    """
    Store files under ``base_path`` and expose them below ``base_url``.

    Paths are relative, POSIX-style and may not escape ``base_path``.

    :param base_path: Root directory on disk.
    :param base_url: Public URL prefix the root directory is served from.
    """

    def __init__(self, base_path: str | os.PathLike[str], base_url: str) -> None:
        self.base_path = Path(base_path).resolve()
        self.base_url = base_url.rstrip("/")

    def _resolve(self, path: str) -> Path:
        rel = PurePosixPath(path)
        if rel.is_absolute() or ".." in rel.parts or not rel.parts:
            raise StorageError(f"invalid storage path: {path!r}")
        full = (self.base_path / Path(*rel.parts)).resolve()
        if self.base_path not in full.parents:
            raise StorageError(f"invalid storage path: {path!r}")
        return full

    def save(self, data: bytes, path: str) -> StoredFile:
        full = self._resolve(path)
        try:
            full.parent.mkdir(parents=True, exist_ok=True)
            # exclusive create: never overwrite an existing upload
            with open(full, "xb") as fh:
                fh.write(data)
        except OSError as exc:
            raise StorageError("failed to save file") from exc
        log.debug("storage.saved", extra={"path": path, "size": len(data)})
        return StoredFile(path=path, url=self.url_for(path), size=len(data))

    def delete(self, path: str) -> None:
        """Remove ``path``; a missing file is not an error."""
        full = self._resolve(path)
        try:
            full.unlink(missing_ok=True)
        except OSError as exc:
            raise StorageError("failed to delete file") from exc

    def exists(self, path: str) -> bool:
        try:
            return self._resolve(path).is_file()
        except StorageError:
            return False

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{PurePosixPath(path).as_posix()}"

    def path_from_url(self, url: str) -> str | None:
        """Return the storage path for URLs we issued, else ``None``."""
        prefix = f"{self.base_url}/"
        if not url or not url.startswith(prefix):
            return None
        return url[len(prefix) :]
