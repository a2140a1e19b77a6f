"""API blueprint package aggregating versioned endpoints."""

from __future__ import annotations

from collections.abc import Iterable

from flask import Blueprint, Flask


def register_blueprint_group(
    app: Flask,
    *,
    base_prefix: str,
    entries: Iterable[tuple[Blueprint, str]],
) -> None:
    """Register related blueprints beneath a common prefix.

    Parameters
    ----------
    app:
        Application instance receiving the blueprints.
    base_prefix:
        Prefix shared by all entries, e.g. ``"/api/v1"``.
    entries:
        ``(blueprint, relative_prefix)`` pairs; an empty relative prefix
        mounts the blueprint at ``base_prefix`` itself.
    """

    root = "/" + base_prefix.strip("/")
    for bp, rel_prefix in entries:
        rel = rel_prefix.strip("/")
        app.register_blueprint(bp, url_prefix=f"{root}/{rel}" if rel else root)


def init_app(app: Flask) -> None:
    """Register the API versions and the service error bridge."""

    api_base = app.config.get("API_BASE_PREFIX", "/api")

    from taskmanager.api.v1 import API_VERSION as V1
    from taskmanager.api.v1 import REGISTRY as V1_REGISTRY

    register_blueprint_group(app, base_prefix=f"{api_base}/{V1}", entries=V1_REGISTRY)

    from taskmanager.api.errors import register_service_error_handler

    register_service_error_handler(app)


__all__ = ["init_app", "register_blueprint_group"]
