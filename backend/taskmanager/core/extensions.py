"""Global Flask extension instances and initialization helpers."""

from __future__ import annotations

from flask import Flask, current_app
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import MetaData

from taskmanager.core.config import AuthSettings

# Global naming convention for all constraints
convention = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)

AUTH_SETTINGS_KEY = "auth_settings"

# Global singletons (import-safe)
db: SQLAlchemy = SQLAlchemy(session_options={"autoflush": False}, metadata=metadata)
migrate = Migrate(render_as_batch=True)
limiter = Limiter(key_func=get_remote_address)


def _default_rate_limit(app: Flask) -> str:
    cfg = app.config
    return (
        f"{int(cfg.get('RATE_LIMIT_MAX_REQUESTS', 100))} per "
        f"{int(cfg.get('RATE_LIMIT_WINDOW_SECONDS', 900))} seconds"
    )


def init_app(app: Flask) -> None:
    """Initialize SQLAlchemy, migrations, rate limiting and token settings.

    Parameters
    ----------
    app: flask.Flask
        Application used to bind extension instances. This call imports the
        :mod:`taskmanager.models` package to ensure SQLAlchemy metadata is
        ready for migrations.

    Notes
    -----
    Token settings are parsed once here and stored frozen under
    ``app.extensions["auth_settings"]``; a misconfigured secret or duration
    fails application startup instead of the first login.
    """
    db.init_app(app)

    # Ensure models are imported so Alembic sees metadata
    from taskmanager import models as _models  # noqa: F401

    migrate.init_app(app, db, directory=app.config.get("MIGRATIONS_DIR", "migrations"))

    app.config.setdefault("RATELIMIT_DEFAULT", _default_rate_limit(app))
    limiter.init_app(app)

    app.extensions[AUTH_SETTINGS_KEY] = AuthSettings.from_mapping(app.config)


def get_auth_settings() -> AuthSettings:
    """Return the token settings of the current application."""
    settings = current_app.extensions.get(AUTH_SETTINGS_KEY)
    if settings is None:
        raise RuntimeError("Auth settings are not initialized. Call init_app() first.")
    return settings  # type: ignore[no-any-return]
