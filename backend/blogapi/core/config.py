"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
from collections.abc import Mapping
from datetime import timedelta
from typing import Final

from dotenv import load_dotenv

# Public selector env var (keep neutral name to avoid collisions)
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'

PLACEHOLDER_SECRETS: Final[frozenset[str]] = frozenset(
    {"CHANGE_ME", "CHANGE_ME_JWT", "CHANGE_ME_API_KEY", ""}
)


# Load .env in development (no-op when the file is missing)
load_dotenv()


def env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean flag from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: bool, optional
        Value returned when the variable is unset. Defaults to ``False``.

    Returns
    -------
    bool
        ``True`` if the value resembles ``{"1", "true", "yes", "y", "on"}``
        ignoring case; otherwise ``False`` or ``default`` when missing.
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


def env_int(name: str, default: int) -> int:
    """Parse an integer from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: int
        Value returned when the variable is unset or blank.

    Returns
    -------
    int
        Parsed value.

    Raises
    ------
    ValueError
        If the variable is set to something that is not an integer.
    """
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    return int(val.strip())


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    SECRET_KEY: str
        Flask secret used for session signing. Defaults to a development-safe
        placeholder and should be overridden in production.
    JWT_SECRET_KEY: str
        Symmetric key used by ``flask-jwt-extended`` to sign tokens.
    JWT_ALGORITHM: str
        Signing algorithm. Decoding only accepts ``JWT_DECODE_ALGORITHMS``.
    JWT_IDENTITY_CLAIM: str
        Claim carrying the principal id (``user_id``).
    JWT_ACCESS_TOKEN_EXPIRES / JWT_REFRESH_TOKEN_EXPIRES: timedelta
        Token lifetimes (3600 s and 604800 s by default).
    API_KEY: str
        Service-level key expected in the ``X-API-KEY`` header.
    BCRYPT_COST: int
        bcrypt work factor.
    PASSWORD_MIN_LENGTH / PASSWORD_MAX_LENGTH: int
        Accepted plaintext length window for hashing.
    SQLALCHEMY_DATABASE_URI: str
        Database connection string consumed by SQLAlchemy.
    REDIS_URL: str | None
        Optional Redis URL for the access-token denylist.
    STORAGE_BASE_PATH / STORAGE_BASE_URL: str
        Local upload directory and the public URL it is served from.
    STORAGE_MAX_SIZE_MB: int
        Maximum accepted upload size.
    IMAGE_MAX_WIDTH / IMAGE_MAX_HEIGHT / IMAGE_QUALITY: int
        Image processing bounds.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).
    CORS_ORIGINS: str
        Comma-separated list of allowed origins for CORS.

    Notes
    -----
    Values are primarily sourced from environment variables, enabling
    configuration without code changes.
    """

    APP_NAME = os.getenv("APP_NAME", "blogapi")
    APP_VERSION = os.getenv("APP_VERSION", "dev")
    API_BASE_PREFIX = "/api"

    # Secrets / security
    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET", os.getenv("JWT_SECRET_KEY", "CHANGE_ME_JWT"))
    JWT_ALGORITHM = "HS256"
    JWT_DECODE_ALGORITHMS = ["HS256"]
    JWT_IDENTITY_CLAIM = "user_id"
    JWT_TOKEN_LOCATION = ["headers"]
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(seconds=env_int("JWT_ACCESS_TOKEN_EXPIRY", 3600))
    JWT_REFRESH_TOKEN_EXPIRES = timedelta(seconds=env_int("JWT_REFRESH_TOKEN_EXPIRY", 604800))
    API_KEY = os.getenv("API_KEY", "CHANGE_ME_API_KEY")
    BCRYPT_COST = env_int("BCRYPT_COST", 10)
    PASSWORD_MIN_LENGTH = 6
    PASSWORD_MAX_LENGTH = 72

    # DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    REDIS_URL = os.getenv("REDIS_URL") or None

    # Storage & images
    STORAGE_BASE_PATH = os.getenv("STORAGE_BASE_PATH", "./uploads")
    STORAGE_BASE_URL = os.getenv("STORAGE_BASE_URL", "http://localhost:8080/uploads")
    STORAGE_MAX_SIZE_MB = env_int("STORAGE_MAX_SIZE_MB", 2)
    IMAGE_MAX_WIDTH = env_int("IMAGE_MAX_WIDTH", 1920)
    IMAGE_MAX_HEIGHT = env_int("IMAGE_MAX_HEIGHT", 1080)
    IMAGE_QUALITY = env_int("IMAGE_QUALITY", 85)

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    # Logging & CORS
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173")

    # Flask built-ins
    DEBUG = False
    TESTING = False

    @classmethod
    def validate(cls) -> None:
        """Hook for environment-specific sanity checks (no-op by default)."""


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development.

    Notes
    -----
    Enables debug mode by default and honors ``SQLALCHEMY_ECHO`` for verbose
    SQL logging when requested.
    """

    DEBUG = env_bool("FLASK_DEBUG", True)
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    CORS_MAX_AGE = 600  # 10 minutes


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Forces ``TESTING`` mode and disables debug logs.
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    - Lowers the bcrypt cost so the suite stays fast.
    """

    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    PROPAGATE_EXCEPTIONS = False
    API_KEY = "test-api-key"
    JWT_SECRET_KEY = "test-jwt-secret-with-enough-length-0123456789"
    BCRYPT_COST = 4
    REDIS_URL = None


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments.

    Notes
    -----
    Keeps debug and SQL echoing disabled while relying on WSGI-level log
    configuration for noise control. :meth:`validate` refuses placeholder
    secrets.
    """

    DEBUG = False
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = False

    @classmethod
    def validate(cls) -> None:
        """Raise ``RuntimeError`` when a placeholder secret is still configured."""
        for key in ("SECRET_KEY", "JWT_SECRET_KEY", "API_KEY"):
            if getattr(cls, key, "") in PLACEHOLDER_SECRETS:
                raise RuntimeError(f"{key} must be set in production")


# Map names -> classes (simple, explicit)
CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Returns
    -------
    type[BaseConfig]
        Class to pass to :meth:`flask.Config.from_object`.

    Notes
    -----
    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)
