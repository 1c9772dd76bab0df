"""Tests for the logging shutdown hook."""

from __future__ import annotations

import io
import logging

from blogapi.core.logger import shutdown_logging
from tests.helpers.utils import not_raises


def test_shutdown_tolerates_closed_streams(monkeypatch):
    stream = io.StringIO()
    handler = logging.StreamHandler(stream)
    stream.close()
    monkeypatch.setattr(logging.getLogger(), "handlers", [handler])

    with not_raises(ValueError):
        shutdown_logging()


def test_shutdown_flushes_open_handlers(monkeypatch):
    stream = io.StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter("%(message)s"))
    monkeypatch.setattr(logging.getLogger(), "handlers", [handler])
    handler.handle(logging.makeLogRecord({"msg": "bye"}))

    shutdown_logging()

    assert stream.getvalue() == "bye\n"
