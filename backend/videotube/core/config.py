"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from datetime import timedelta
from typing import Any, Final

from dotenv import load_dotenv

# Public selector env var (keep neutral name to avoid collisions)
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'

DEFAULT_ACCESS_SECRET: Final[str] = "CHANGE_ME_ACCESS"
DEFAULT_REFRESH_SECRET: Final[str] = "CHANGE_ME_REFRESH"

_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhdw]?)\s*$", re.IGNORECASE)
_DURATION_UNITS = {"": 1, "s": 1, "m": 60, "h": 3600, "d": 86400, "w": 604800}


# Loads .env in development (no-op when the file is missing)
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


def parse_duration(value: str | int | timedelta) -> timedelta:
    """Convert ``"15m"``, ``"1d"``, ``"10d"`` or plain seconds into a timedelta.

    :param value: Duration literal, seconds, or an existing ``timedelta``.
    :returns: Parsed duration.
    :raises ValueError: If the literal is not understood.
    """
    if isinstance(value, timedelta):
        return value
    if isinstance(value, int):
        return timedelta(seconds=value)
    match = _DURATION_RE.match(str(value))
    if match is None:
        raise ValueError(f"Invalid duration literal: {value!r}")
    amount, unit = match.groups()
    return timedelta(seconds=int(amount) * _DURATION_UNITS[unit.lower()])


def env_duration(name: str, default: str) -> timedelta:
    """Read a duration literal from the environment (see :func:`parse_duration`)."""
    return parse_duration(os.getenv(name, default))


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    SQLALCHEMY_DATABASE_URI: str
        Database connection string consumed by SQLAlchemy.
    DB_NAME: str
        Logical database name, reported in startup logs.
    ACCESS_TOKEN_SECRET / REFRESH_TOKEN_SECRET: str
        Independent signing keys for access and refresh tokens.
    ACCESS_TOKEN_EXPIRY / REFRESH_TOKEN_EXPIRY: timedelta
        Token lifetimes, read from literals such as ``"1d"`` or ``"10d"``.
    JWT_ALGORITHM: str
        HMAC algorithm used for both token types.
    AUTH_COOKIE_SECURE / AUTH_COOKIE_SAMESITE:
        Attributes of the ``accessToken`` and ``refreshToken`` cookies.
    SUPABASE_URL / SUPABASE_KEY / MEDIA_BUCKET: str
        Object storage credentials and bucket for avatars and cover images.
        Uploads are disabled when the URL is blank.
    MAX_CONTENT_LENGTH: int
        Request size ceiling (multipart uploads included).
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).
    CORS_ORIGINS: str
        Comma-separated list of allowed origins for CORS.

    Notes
    -----
    Values are primarily sourced from environment variables, enabling
    configuration without code changes.
    """

    APP_ENV = "development"
    API_BASE_PREFIX = "/api"

    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")

    # Tokens
    ACCESS_TOKEN_SECRET = os.getenv("ACCESS_TOKEN_SECRET", DEFAULT_ACCESS_SECRET)
    ACCESS_TOKEN_EXPIRY = env_duration("ACCESS_TOKEN_EXPIRY", "1d")
    REFRESH_TOKEN_SECRET = os.getenv("REFRESH_TOKEN_SECRET", DEFAULT_REFRESH_SECRET)
    REFRESH_TOKEN_EXPIRY = env_duration("REFRESH_TOKEN_EXPIRY", "10d")
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")

    # Session cookies
    AUTH_COOKIE_SECURE = env_bool("AUTH_COOKIE_SECURE", True)
    AUTH_COOKIE_SAMESITE = os.getenv("AUTH_COOKIE_SAMESITE", "Lax")

    # DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./videotube.db")
    DB_NAME = os.getenv("DB_NAME", "videotube")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    # Media storage
    SUPABASE_URL = os.getenv("SUPABASE_URL", "")
    SUPABASE_KEY = os.getenv("SUPABASE_KEY", "")
    MEDIA_BUCKET = os.getenv("MEDIA_BUCKET", "videotube")
    MAX_CONTENT_LENGTH = int(os.getenv("MAX_CONTENT_LENGTH", str(16 * 1024 * 1024)))

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    # Logging & CORS
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGIN", os.getenv("CORS_ORIGINS", "http://localhost:5173"))
    USE_PROXYFIX = env_bool("USE_PROXYFIX", True)

    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development.

    Notes
    -----
    Enables debug mode by default and allows plain-HTTP cookies so the
    session works against a local frontend.
    """

    DEBUG = env_bool("FLASK_DEBUG", True)
    AUTH_COOKIE_SECURE = env_bool("AUTH_COOKIE_SECURE", False)
    CORS_MAX_AGE = 600  # 10 minutes


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Forces ``TESTING`` mode and disables debug logs.
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    - Never talks to the real object store.
    """

    APP_ENV = "testing"
    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    SQLALCHEMY_ECHO = False
    ACCESS_TOKEN_SECRET = "test-access-secret-0123456789abcdef"
    REFRESH_TOKEN_SECRET = "test-refresh-secret-0123456789abcdef"
    ACCESS_TOKEN_EXPIRY = timedelta(minutes=15)
    REFRESH_TOKEN_EXPIRY = timedelta(days=7)
    SUPABASE_URL = ""
    SUPABASE_KEY = ""
    LOG_LEVEL = "WARNING"


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments.

    Notes
    -----
    Keeps debug disabled and forces secure cookies. Default token secrets are
    rejected at startup (see :func:`ensure_production_secrets`).
    """

    APP_ENV = "production"
    DEBUG = False
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = False
    AUTH_COOKIE_SECURE = True


# Map names -> classes (simple, explicit)
CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)


def ensure_production_secrets(config: Mapping[str, Any]) -> None:
    """Refuse to boot a production app with placeholder token secrets.

    :param config: Loaded Flask config mapping.
    :raises RuntimeError: When a default secret is still in place.
    """
    if config.get("APP_ENV") != "production":
        return
    if config.get("ACCESS_TOKEN_SECRET") in (None, "", DEFAULT_ACCESS_SECRET):
        raise RuntimeError("ACCESS_TOKEN_SECRET must be set in production")
    if config.get("REFRESH_TOKEN_SECRET") in (None, "", DEFAULT_REFRESH_SECRET):
        raise RuntimeError("REFRESH_TOKEN_SECRET must be set in production")
