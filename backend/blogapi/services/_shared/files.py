"""Scoped file + database write helpers."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from blogapi.services._shared.errors import StorageError
from blogapi.services._shared.ports import FileStorage, StoredFile


@contextmanager
def stored_file(
    storage: FileStorage,
    data: bytes,
    path: str,
    *,
    logger: logging.Logger,
) -> Iterator[StoredFile]:
    """
    Save ``data`` and remove it again if the enclosed block fails.

    Wrap both the row insert and the commit in the block: when any exception
    escapes, the stored file is deleted before the exception propagates.

    :param storage: Storage backend.
    :param data: File bytes.
    :param path: Relative destination path.
    :param logger: Logger receiving the rollback event.
    :yields: The stored file descriptor.
    """
    stored = storage.save(data, path)
    try:
        yield stored
    except BaseException:
        try:
            storage.delete(stored.path)
        except StorageError:
            logger.error(
                "storage.rollback_failed",
                extra={"path": stored.path},
                exc_info=True,
            )
        else:
            logger.warning("storage.rolled_back", extra={"path": stored.path})
        raise
