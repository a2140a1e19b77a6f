"""Reverse-proxy awareness for client addresses and URL schemes."""

from __future__ import annotations

from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix


def init_app(app: Flask) -> None:
    """Wrap the WSGI app in :class:`ProxyFix` when ``PROXY_FIX_HOPS`` > 0.

    The rate limiter keys on ``request.remote_addr``; behind a proxy that
    address is the proxy's unless ``X-Forwarded-For`` is trusted for the
    configured number of hops.
    """
    hops = int(app.config.get("PROXY_FIX_HOPS", 0) or 0)
    if hops > 0:
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=hops, x_proto=hops, x_host=hops)
