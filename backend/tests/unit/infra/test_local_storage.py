"""Unit tests for LocalFileStorage."""

from __future__ import annotations

import pytest

from blogapi.infra.storage.local_storage import LocalFileStorage
from blogapi.services._shared.errors import StorageError


@pytest.fixture()
def storage(tmp_path) -> LocalFileStorage:
    return LocalFileStorage(tmp_path, "http://cdn.test/uploads/")


def test_save_writes_file_and_builds_url(storage, tmp_path):
    stored = storage.save(b"abc", "media/one.jpg")

    assert (tmp_path / "media" / "one.jpg").read_bytes() == b"abc"
    assert stored.url == "http://cdn.test/uploads/media/one.jpg"
    assert stored.size == 3
    assert storage.exists("media/one.jpg")


def test_save_never_overwrites(storage):
    storage.save(b"abc", "media/one.jpg")
    with pytest.raises(StorageError):
        storage.save(b"xyz", "media/one.jpg")


@pytest.mark.parametrize("path", ["../escape.jpg", "/etc/passwd", "media/../../x.jpg", ""])
def test_rejects_paths_outside_root(storage, path):
    with pytest.raises(StorageError):
        storage.save(b"abc", path)
    assert storage.exists(path) is False


def test_delete_is_idempotent(storage):
    storage.save(b"abc", "media/one.jpg")
    storage.delete("media/one.jpg")
    storage.delete("media/one.jpg")

    assert not storage.exists("media/one.jpg")


def test_path_from_url_only_for_own_urls(storage):
    assert storage.path_from_url("http://cdn.test/uploads/avatars/a.jpg") == "avatars/a.jpg"
    assert storage.path_from_url("https://ui-avatars.com/api/?name=A") is None
    assert storage.path_from_url("") is None
