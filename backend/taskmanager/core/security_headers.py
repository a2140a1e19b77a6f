"""Hardening headers attached to every response."""

from __future__ import annotations

from flask import Flask, Response

# JSON-only API: nothing may be framed, sniffed or loaded from the response.
SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "0",
    "X-Permitted-Cross-Domain-Policies": "none",
    "Referrer-Policy": "no-referrer",
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "same-site",
    "Content-Security-Policy": "default-src 'none'; frame-ancestors 'none'",
}


def build_headers(hsts_max_age: int) -> dict[str, str]:
    """Return the header set, adding HSTS when ``hsts_max_age`` > 0."""
    headers = dict(SECURITY_HEADERS)
    if hsts_max_age > 0:
        headers["Strict-Transport-Security"] = f"max-age={hsts_max_age}; includeSubDomains"
    return headers


def init_app(app: Flask) -> None:
    """Register an ``after_request`` hook applying :data:`SECURITY_HEADERS`.

    ``SECURITY_HSTS_MAX_AGE`` controls ``Strict-Transport-Security``; it is
    never sent while ``TESTING`` is on. Headers a view already set win.
    """
    hsts = 0 if app.testing else int(app.config.get("SECURITY_HSTS_MAX_AGE", 0) or 0)
    headers = build_headers(hsts)

    @app.after_request
    def _apply_security_headers(response: Response) -> Response:
        for name, value in headers.items():
            response.headers.setdefault(name, value)
        return response
