"""Shared API helpers: bearer authentication, role gates and envelopes."""

from __future__ import annotations

import functools
import logging
import time
from collections.abc import Callable
from typing import Any, TypeVar

from flask import Response, current_app, g, jsonify, request
from marshmallow import Schema

from taskmanager.core.errors import Forbidden, Unauthorized, envelope
from taskmanager.core.extensions import get_auth_settings
from taskmanager.core.logger import ensure_request_id
from taskmanager.infra.jwt import PyJWTTokenProvider
from taskmanager.services._shared.base import ServiceContext
from taskmanager.services._shared.errors import (
    AuthenticationError,
    AuthorizationError,
    NotFoundError,
)
from taskmanager.services.auth.dto import CurrentUser
from taskmanager.services.auth.service import AuthService
from taskmanager.services.tasks.service import TaskService

F = TypeVar("F", bound=Callable[..., Any])

log = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


# ------------------------------ Services --------------------------------- #


def service_context() -> ServiceContext:
    """Build the service context from ``g.current_user`` (anonymous when unset)."""
    user: CurrentUser | None = getattr(g, "current_user", None)
    return ServiceContext(
        actor_id=user.id if user else None,
        actor_role=user.role if user else None,
        request_id=ensure_request_id(),
    )


def auth_service() -> AuthService:
    return AuthService(
        token_provider=PyJWTTokenProvider(get_auth_settings()),
        ctx=service_context(),
    )


def task_service() -> TaskService:
    return TaskService(ctx=service_context())


# ------------------------------ Requests --------------------------------- #


def load_body(schema: Schema) -> Any:
    """Validate the JSON body with ``schema``; a missing body loads as ``{}``."""
    return schema.load(request.get_json(silent=True) or {})


def bearer_token() -> str | None:
    """Return the token of an ``Authorization: Bearer <token>`` header, if any."""
    header = request.headers.get("Authorization", "")
    if not header.startswith(BEARER_PREFIX):
        return None
    token = header[len(BEARER_PREFIX):].strip()
    return token or None


def _authenticate(token: str) -> CurrentUser:
    user = auth_service().authenticate_access_token(token)
    g.current_user = user
    return user


def require_auth(func: F) -> F:
    """Reject the request with 401 unless it carries a valid access token."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        token = bearer_token()
        if token is None:
            raise Unauthorized("Not authorized, no token")
        _authenticate(token)
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def optional_auth(func: F) -> F:
    """Attach the caller when a valid bearer token is present.

    A missing or unusable token leaves the request anonymous; routes that
    need an actor reject it themselves.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        token = bearer_token()
        if token is not None:
            try:
                _authenticate(token)
            except (AuthenticationError, AuthorizationError, NotFoundError) as exc:
                g.pop("current_user", None)
                log.debug("auth.optional_ignored", extra={"reason": type(exc).__name__})
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def require_roles(*roles: str) -> Callable[[F], F]:
    """Reject with 403 unless ``g.current_user.role`` is one of ``roles``.

    Stack it under :func:`require_auth`.
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any):
            user: CurrentUser | None = getattr(g, "current_user", None)
            if user is None:
                raise Unauthorized("Not authorized, no token")
            if user.role not in roles:
                raise Forbidden(f"User role '{user.role}' is not authorized to access this route")
            return func(*args, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator


# ------------------------------ Responses -------------------------------- #


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def success(message: str, data: Any | None = None, *, status: int = 200) -> Response:
    """Wrap ``data`` in the success envelope."""
    return json_response(envelope(success=True, message=message, data=data), status=status)


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request.endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
