"""Application factory wiring Flask extensions and blueprints."""

from __future__ import annotations

import os

from flask import Flask, send_from_directory

from blogapi.core.config import BaseConfig, get_config
from blogapi.core.logger import configure_logging, init_app as init_logging


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    instance_relative_config: bool = True,
    instance_config_filename: str = "config.py",
) -> Flask:
    """Build and configure the Flask application."""

    app = Flask(__name__, instance_relative_config=instance_relative_config)

    config_obj = get_config() if config is None else config
    app.config.from_object(config_obj)
    if instance_relative_config and instance_config_filename:
        app.config.from_pyfile(instance_config_filename, silent=True)

    validate = getattr(config_obj, "validate", None)
    if callable(validate):
        validate()

    app_logger = configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    # Proxy headers if running behind a reverse proxy (optional module)
    from blogapi.core import proxy

    proxy.init_app(app)

    from blogapi.core import extensions

    extensions.init_app(app)

    init_logging(app, app_logger)

    from blogapi.core import providers

    providers.init_app(app)

    from blogapi.core import cors

    cors.init_app(app)

    from blogapi.api import init_app as init_api

    init_api(app)

    from blogapi.core import errors

    errors.init_app(app)

    from blogapi import cli as app_cli

    app_cli.init_app(app)

    _register_uploads(app)

    return app


def _register_uploads(app: Flask) -> None:
    """Serve locally stored uploads from ``/uploads/<path>``."""

    base_path = os.path.abspath(app.config["STORAGE_BASE_PATH"])

    @app.get("/uploads/<path:filename>")
    def uploaded_file(filename: str):
        return send_from_directory(base_path, filename)
