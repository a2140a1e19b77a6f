"""Application factory wiring Flask extensions and blueprints."""

from __future__ import annotations

from flask import Flask

from taskmanager import api, cli
from taskmanager.core import cors, errors, extensions, logger, proxy, security_headers
from taskmanager.core.config import BaseConfig, get_config

# proxy must wrap the WSGI app before anything reads remote_addr.
_INITIALIZERS = (
    proxy.init_app,
    extensions.init_app,
    logger.init_app,
    cors.init_app,
    security_headers.init_app,
    api.init_app,
    errors.init_app,
    cli.init_app,
)


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    instance_config_filename: str | None = "config.py",
) -> Flask:
    """Build and configure the Flask application.

    :param config: Config class/object or import path; ``None`` picks one
        from ``APP_ENV``.
    :param instance_config_filename: Optional overrides read from the
        instance folder (missing file is ignored).
    :returns: Ready-to-serve application.
    """
    app = Flask(__name__, instance_relative_config=True)
    app.json.sort_keys = False

    app.config.from_object(get_config() if config is None else config)
    if instance_config_filename:
        app.config.from_pyfile(instance_config_filename, silent=True)

    logger.configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    for init in _INITIALIZERS:
        init(app)

    return app
