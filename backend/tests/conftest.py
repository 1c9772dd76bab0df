"""Pytest fixtures configuring an isolated transactional database layer.

Each test runs inside a SAVEPOINT-backed transaction against an in-memory
SQLite database so data changes never leak between cases. Service units of
work commit and roll back *inside* that SAVEPOINT.
"""

from __future__ import annotations

import os

import pytest
from sqlalchemy import event
from sqlalchemy.orm import scoped_session, sessionmaker
from sqlalchemy.pool import StaticPool

from blogapi.core.config import TestingConfig
from blogapi.core.extensions import db as _db  # Flask-SQLAlchemy instance
from blogapi.factory import create_app  # application factory under test

API_KEY = "test-api-key"


@pytest.fixture(scope="session")
def upload_dir(tmp_path_factory):
    """Directory receiving files written by the local storage backend."""
    return tmp_path_factory.mktemp("uploads")


@pytest.fixture(scope="session")
def app(upload_dir):
    """Create a Flask application configured for testing.

    Returns
    -------
    flask.Flask
        Application instance with :class:`TestingConfig` applied, uploads
        redirected to a temporary directory and logging noise reduced.
    """
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    os.environ.pop("REDIS_URL", None)

    class TestConfig(TestingConfig):
        SQLALCHEMY_DATABASE_URI = "sqlite://"
        SQLALCHEMY_ENGINE_OPTIONS = {
            "poolclass": StaticPool,
            "connect_args": {"check_same_thread": False},
        }
        STORAGE_BASE_PATH = str(upload_dir)
        STORAGE_BASE_URL = "http://testserver/uploads"
        LOG_LEVEL = "WARNING"

    app = create_app(TestConfig, instance_relative_config=False)
    app.logger.setLevel("WARNING")
    return app


@pytest.fixture(scope="session")
def db(app):
    """Create database tables once per test session.

    Yields
    ------
    flask_sqlalchemy.SQLAlchemy
        Database extension bound to the testing application.
    """
    with app.app_context():
        _db.create_all()
        yield _db
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope="session")
def connection(db):
    """Keep a dedicated DBAPI connection open for the whole session."""
    conn = db.engine.connect()
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="function")
def session(db, connection):
    """Provide a SQLAlchemy session wrapped in a nested transaction.

    Notes
    -----
    The fixture mirrors the SQLAlchemy 2.0 pattern for transactional tests: it
    begins a top-level transaction, starts a SAVEPOINT per test, and reinstalls
    the SAVEPOINT whenever SQLAlchemy ends one. The session joins with
    ``create_savepoint`` semantics, so ``commit()`` only releases its own
    SAVEPOINT and ``rollback()`` only undoes its own work.
    """
    # 1) Top-level transaction
    top_trans = connection.begin()

    # 2) Scoped session bound to the connection
    SessionFactory = sessionmaker(bind=connection, future=True, autoflush=False)
    scoped = scoped_session(SessionFactory)

    # 3) SAVEPOINT per test
    nested = connection.begin_nested()

    # 4) Re-create SAVEPOINT when the previous nested transaction ends
    @event.listens_for(scoped(), "after_transaction_end")
    def _restart_savepoint(sess, trans):  # pragma: no cover
        if trans.nested and not trans._parent.nested:
            nonlocal nested
            nested = connection.begin_nested()

    # 5) Monkey-patch db.session so app code uses this scoped session
    original_session = db.session
    db.session.remove()
    db.session = scoped

    try:
        yield scoped
    finally:
        scoped.remove()
        db.session = original_session
        top_trans.rollback()


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


# -- Hook up Factory Boy to pytest SQLAlchemy session --------------------------
@pytest.fixture(autouse=True)
def _factories_session(session):
    """Wire Factory Boy's session helper to the transactional session fixture."""
    from tests.factories import SQLAlchemySession

    SQLAlchemySession.set(session)
    yield


# -- HTTP helpers ---------------------------------------------------------------
@pytest.fixture()
def client(app):
    """Return a Flask test client."""
    return app.test_client()


@pytest.fixture()
def api_headers():
    """Build request headers carrying the API key and an optional bearer token."""

    def _build(token: str | None = None) -> dict[str, str]:
        headers = {"X-API-KEY": API_KEY}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    return _build


@pytest.fixture()
def login(client, api_headers):
    """Log a user in through the API and return the ``data`` payload."""

    def _login(email: str, password: str = "Passw0rd!") -> dict:
        resp = client.post(
            "/api/v1/auth/login",
            json={"email": email, "password": password},
            headers=api_headers(),
        )
        assert resp.status_code == 200, resp.get_json()
        return resp.get_json()["data"]

    return _login


@pytest.fixture()
def providers(app):
    """Adapters registered on the application."""
    from blogapi.core.providers import get_providers

    return get_providers(app)
