"""Structured logging configuration with request correlation."""

from __future__ import annotations

import atexit
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from flask import Flask, g, has_request_context, request

APP_LOGGER_NAME = "blogapi"
REQUEST_ID_HEADER = "X-Request-ID"
CORRELATION_HEADERS = ("X-Request-ID", "X-Correlation-ID")

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None)).keys()
    | {"message", "asctime", "request_id"}
)

_shutdown_registered = False


class JSONFormatter(logging.Formatter):
    """Render log records as JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "time": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", None),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        for key, value in vars(record).items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                payload[key] = value
        return json.dumps(payload, default=str)


class RequestIdFilter(logging.Filter):
    """Ensure a ``request_id`` attribute is always present on log records."""

    def filter(self, record: logging.LogRecord) -> bool:  # pragma: no cover - trivial
        record.request_id = ensure_request_id() if has_request_context() else None
        return True


def ensure_request_id() -> str:
    """Return the current request identifier, generating one when necessary."""

    if has_request_context():
        if hasattr(g, "request_id"):
            return g.request_id  # type: ignore[return-value]
        for header in CORRELATION_HEADERS:
            value = request.headers.get(header)
            if value:
                g.request_id = value
                return value
        request_id = str(uuid4())
        g.request_id = request_id
        return request_id
    return str(uuid4())


def configure_logging(level: str | int = "INFO") -> logging.Logger:
    """Configure the root logger with JSON-formatted stdout output.

    :param level: Root level name or number.
    :returns: The application logger that components receive explicitly.
    :rtype: logging.Logger
    """

    global _shutdown_registered

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())
    handler.addFilter(RequestIdFilter())
    root = logging.getLogger()
    for old in list(root.handlers):
        old.flush()
    root.handlers.clear()
    root.addHandler(handler)
    level_value: int | str = level
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        level_value = resolved if isinstance(resolved, int) else level.upper()
    root.setLevel(level_value)

    if not _shutdown_registered:
        atexit.register(shutdown_logging)
        _shutdown_registered = True
    return logging.getLogger(APP_LOGGER_NAME)


def shutdown_logging() -> None:
    """Flush and close every root handler (process shutdown hook)."""

    root = logging.getLogger()
    for handler in list(root.handlers):
        # Streams may already be closed at interpreter exit.
        try:
            handler.flush()
            handler.close()
        except (OSError, ValueError):
            pass


def get_logger(app: Flask) -> logging.Logger:
    """Return the application logger registered by :func:`init_app`."""

    logger = app.extensions.get("app_logger")
    if logger is None:
        raise RuntimeError("Application logger is not initialized. Call init_app() first.")
    return logger


def init_app(app: Flask, logger: logging.Logger | None = None) -> None:
    """Inject request-id middleware and register the application logger."""

    app.logger.addFilter(RequestIdFilter())
    app.extensions["app_logger"] = logger or logging.getLogger(APP_LOGGER_NAME)

    @app.before_request
    def _seed_request_id() -> None:  # pragma: no cover - integration glue
        g.pop("request_id", None)
        ensure_request_id()

    @app.after_request
    def _inject_response_header(response):  # pragma: no cover - integration glue
        response.headers.setdefault(REQUEST_ID_HEADER, ensure_request_id())
        return response


__all__ = [
    "configure_logging",
    "init_app",
    "ensure_request_id",
    "get_logger",
    "shutdown_logging",
]
