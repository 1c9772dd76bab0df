"""Multipart upload parsing shared by the avatar and media endpoints."""

from __future__ import annotations

from flask import request

from blogapi.core.errors import BadRequest

UPLOAD_FIELD = "file"


def read_upload(field: str = UPLOAD_FIELD) -> tuple[str, str | None, bytes]:
    """Return ``(filename, content_type, data)`` of the uploaded file.

    :raises BadRequest: No file part, or an empty one.
    """
    storage = request.files.get(field)
    if storage is None or not storage.filename:
        raise BadRequest("file is required")
    data = storage.read()
    if not data:
        raise BadRequest("file is empty")
    return storage.filename, storage.mimetype or None, data
