"""CORS policy for the browser client calling the API."""

from __future__ import annotations

from flask import Flask
from flask_cors import CORS

ALLOWED_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
ALLOWED_HEADERS = ["Authorization", "Content-Type", "X-Request-ID"]


def parse_origins(raw: str | None) -> list[str] | str:
    """Return the configured origin list, or ``"*"`` when unrestricted."""
    origins = [o.strip().rstrip("/") for o in (raw or "").split(",") if o.strip()]
    if not origins or "*" in origins:
        return "*"
    return origins


def init_app(app: Flask) -> None:
    """Allow the configured ``CORS_ORIGINS`` to call ``/api/*``.

    Credentials are only supported for an explicit origin list; a wildcard
    policy never sends ``Access-Control-Allow-Credentials``.
    """
    origins = parse_origins(app.config.get("CORS_ORIGINS"))
    wildcard = origins == "*"

    CORS(
        app,
        resources={r"/api/*": {"origins": origins}},
        methods=ALLOWED_METHODS,
        allow_headers=ALLOWED_HEADERS,
        expose_headers=["X-Request-ID"],
        supports_credentials=not wildcard,
        max_age=app.config.get("CORS_MAX_AGE", 600),
    )
