"""HTTP tests for the catch-all error handler."""

from __future__ import annotations

import logging

import pytest
from sqlalchemy.pool import StaticPool

from blogapi.core.config import TestingConfig
from blogapi.factory import create_app

SECRET = "secret internal detail"


@pytest.fixture()
def failing_client(tmp_path):
    """Client of a fresh app exposing a route that raises a plain exception."""

    class FailingConfig(TestingConfig):
        SQLALCHEMY_DATABASE_URI = "sqlite://"
        SQLALCHEMY_ENGINE_OPTIONS = {"poolclass": StaticPool}
        STORAGE_BASE_PATH = str(tmp_path)
        LOG_LEVEL = "WARNING"

    app = create_app(FailingConfig, instance_relative_config=False)

    @app.get("/api/v1/_explode")
    def explode():
        raise RuntimeError(SECRET)

    return app.test_client()


def test_unexpected_error_is_generic_500(failing_client, caplog):
    with caplog.at_level(logging.ERROR, logger="blogapi.core.errors"):
        resp = failing_client.get(
            "/api/v1/_explode",
            headers={"X-API-KEY": "test-api-key", "X-Request-ID": "req-500"},
        )

    assert resp.status_code == 500
    assert resp.mimetype == "application/problem+json"
    body = resp.get_json()
    assert body["code"] == "internal_server_error"
    assert body["detail"] == "Unexpected error"
    assert body["request_id"] == "req-500"
    assert SECRET not in resp.get_data(as_text=True)

    records = [r for r in caplog.records if r.name == "blogapi.core.errors"]
    assert records and records[-1].exc_info[0] is RuntimeError
