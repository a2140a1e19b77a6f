"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import Any, Final

from dotenv import load_dotenv

# Public selector env var (keep neutral name to avoid collisions)
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'

# Load .env in development (no-op when the file does not exist)
load_dotenv()

_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhdw]?)\s*$", re.IGNORECASE)
_DURATION_UNITS = {
    "": "seconds",
    "s": "seconds",
    "m": "minutes",
    "h": "hours",
    "d": "days",
    "w": "weeks",
}


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
    """Parse an integer environment variable, falling back to ``default``."""
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    try:
        return int(val)
    except ValueError:
        return default


def parse_duration(value: str | int | timedelta) -> timedelta:
    """Convert a compact duration such as ``"15m"`` or ``"7d"`` to a timedelta.

    Bare integers are read as seconds. Supported suffixes are ``s``, ``m``,
    ``h``, ``d`` and ``w``.

    :param value: Duration string, number of seconds or ``timedelta``.
    :returns: Parsed duration.
    :rtype: datetime.timedelta
    :raises ValueError: If the value cannot be parsed or is not positive.
    """
    if isinstance(value, timedelta):
        delta = value
    elif isinstance(value, int):
        delta = timedelta(seconds=value)
    else:
        match = _DURATION_RE.match(str(value))
        if match is None:
            raise ValueError(f"Invalid duration: {value!r}")
        amount, unit = match.groups()
        delta = timedelta(**{_DURATION_UNITS[unit.lower()]: int(amount)})
    if delta.total_seconds() <= 0:
        raise ValueError(f"Duration must be positive: {value!r}")
    return delta


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    PORT: int
        Port used by ``flask run``/gunicorn wrappers.
    SECRET_KEY: str
        Flask secret; unrelated to token signing.
    JWT_ACCESS_SECRET: str
        Key signing access tokens.
    JWT_REFRESH_SECRET: str
        Independent key signing refresh tokens.
    JWT_ACCESS_EXPIRES: str
        Access token lifetime (``"7d"`` by default).
    JWT_REFRESH_EXPIRES: str
        Refresh token lifetime (``"30d"`` by default).
    SQLALCHEMY_DATABASE_URI: str
        Database connection string consumed by SQLAlchemy.
    RATE_LIMIT_WINDOW_SECONDS: int
        Window for the global per-client request limit.
    RATE_LIMIT_MAX_REQUESTS: int
        Requests allowed per window.
    CORS_ORIGINS: str
        Comma-separated list of allowed origins for browser calls.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).
    SECURITY_HSTS_MAX_AGE: int
        ``Strict-Transport-Security`` max-age; 0 turns HSTS off.

    Notes
    -----
    Values are primarily sourced from environment variables, enabling
    configuration without code changes.
    """

    API_BASE_PREFIX = "/api"
    PORT = env_int("PORT", 5000)

    # Secrets / security
    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")
    JWT_ACCESS_SECRET = os.getenv("JWT_ACCESS_SECRET", "CHANGE_ME_ACCESS")
    JWT_REFRESH_SECRET = os.getenv("JWT_REFRESH_SECRET", "CHANGE_ME_REFRESH")
    JWT_ACCESS_EXPIRES = os.getenv("JWT_ACCESS_EXPIRES", "7d")
    JWT_REFRESH_EXPIRES = os.getenv("JWT_REFRESH_EXPIRES", "30d")
    JWT_ALGORITHM = "HS256"

    # DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    MIGRATIONS_DIR = os.getenv(
        "MIGRATIONS_DIR", str(Path(__file__).resolve().parents[2] / "migrations")
    )

    # Rate limiting (Flask-Limiter)
    RATE_LIMIT_WINDOW_SECONDS = env_int("RATE_LIMIT_WINDOW_SECONDS", 15 * 60)
    RATE_LIMIT_MAX_REQUESTS = env_int("RATE_LIMIT_MAX_REQUESTS", 100)
    RATELIMIT_ENABLED = env_bool("RATELIMIT_ENABLED", True)
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")
    RATELIMIT_HEADERS_ENABLED = True
    AUTH_LOGIN_RATE_LIMIT = os.getenv("AUTH_LOGIN_RATE_LIMIT", "20 per minute")

    # Number of trusted reverse proxies in front of the app (0 = none)
    PROXY_FIX_HOPS = env_int("PROXY_FIX_HOPS", 0)

    # Strict-Transport-Security lifetime in seconds (0 disables the header)
    SECURITY_HSTS_MAX_AGE = env_int("SECURITY_HSTS_MAX_AGE", 180 * 24 * 60 * 60)

    # Flask
    PROPAGATE_EXCEPTIONS = False

    # Logging & CORS
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173")

    # Flask built-ins
    DEBUG = False
    TESTING = False


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
    - Disables the global rate limit so suites can hammer the API.
    """

    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    SQLALCHEMY_ECHO = False
    RATELIMIT_ENABLED = False
    JWT_ACCESS_SECRET = "test-access-secret"
    JWT_REFRESH_SECRET = "test-refresh-secret"
    LOG_LEVEL = "WARNING"


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments.

    Notes
    -----
    Keeps debug and SQL echoing disabled while relying on WSGI-level log
    configuration for noise control.
    """

    DEBUG = False
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = False


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


@dataclass(frozen=True, slots=True)
class AuthSettings:
    """
    Immutable token configuration resolved once at startup.

    :param access_secret: Key signing access tokens.
    :param refresh_secret: Key signing refresh tokens (must differ).
    :param access_expires: Access token lifetime.
    :param refresh_expires: Refresh token lifetime.
    :param algorithm: JWS algorithm used for both token classes.
    """

    access_secret: str
    refresh_secret: str
    access_expires: timedelta
    refresh_expires: timedelta
    algorithm: str = "HS256"

    def __post_init__(self) -> None:
        if not self.access_secret or not self.refresh_secret:
            raise ValueError("Both JWT secrets must be configured.")
        if self.access_secret == self.refresh_secret:
            raise ValueError("Access and refresh secrets must be different.")

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> AuthSettings:
        """Build settings from a Flask config mapping."""
        return cls(
            access_secret=str(config["JWT_ACCESS_SECRET"]),
            refresh_secret=str(config["JWT_REFRESH_SECRET"]),
            access_expires=parse_duration(config.get("JWT_ACCESS_EXPIRES", "7d")),
            refresh_expires=parse_duration(config.get("JWT_REFRESH_EXPIRES", "30d")),
            algorithm=str(config.get("JWT_ALGORITHM", "HS256")),
        )
