"""Centralized JSON error handling for the API.

Every error leaves the application inside the same envelope used by
successful responses::

    {"success": false, "message": "...", "errors": ["..."]}
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, jsonify, request
from marshmallow import ValidationError as MarshmallowValidationError
from sqlalchemy.exc import IntegrityError, OperationalError
from werkzeug.exceptions import HTTPException

from taskmanager.core.logger import ensure_request_id

log = logging.getLogger(__name__)


def flatten_messages(messages: Any, prefix: str = "") -> list[str]:
    """
    Flatten nested marshmallow messages into ``"field: message"`` strings.

    :param messages: ``dict``/``list``/``str`` tree from ``err.messages``.
    :param prefix: Dotted path of the parent field.
    :returns: Human-readable error lines, in field order.
    :rtype: list[str]
    """
    if isinstance(messages, dict):
        out: list[str] = []
        for key, value in messages.items():
            if key == "_schema":
                path = prefix
            else:
                path = f"{prefix}.{key}" if prefix else str(key)
            out.extend(flatten_messages(value, path))
        return out
    if isinstance(messages, (list, tuple)):
        out = []
        for item in messages:
            out.extend(flatten_messages(item, prefix))
        return out
    text = str(messages)
    return [f"{prefix}: {text}" if prefix else text]


def envelope(
    *,
    success: bool,
    message: str,
    data: Any | None = None,
    errors: list[str] | None = None,
) -> dict[str, Any]:
    """Build the response envelope shared by every endpoint."""
    body: dict[str, Any] = {"success": success, "message": message}
    if data is not None:
        body["data"] = data
    if errors:
        body["errors"] = errors
    return body


def _error_response(status: int, message: str, errors: list[str] | None = None) -> Response:
    resp = jsonify(envelope(success=False, message=message, errors=errors))
    resp.status_code = int(status)
    return resp


class APIError(Exception):
    """
    Represent a JSON-serializable API error.

    Parameters
    ----------
    message : str
        Human-readable description presented to clients.
    status_code : int, optional
        HTTP status code to return. Defaults to ``400``.
    code : str, optional
        Machine-readable identifier used in logs. Defaults to
        ``"bad_request"``.
    errors : list[str] | None, optional
        Field-level messages rendered under ``errors``.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 400,
        code: str = "bad_request",
        errors: list[str] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = int(status_code)
        self.code = code
        self.errors = list(errors or [])

    def to_envelope(self) -> dict[str, Any]:
        """Serialize error metadata into the response envelope."""
        return envelope(success=False, message=self.message, errors=self.errors or None)


# Domain conveniences
class BadRequest(APIError):
    """400 for malformed input."""

    def __init__(self, message: str = "Validation error", errors: list[str] | None = None) -> None:
        super().__init__(message, status_code=HTTPStatus.BAD_REQUEST, code="validation_error", errors=errors)


class NotFound(APIError):
    """404 when resources are missing."""

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message, status_code=HTTPStatus.NOT_FOUND, code="not_found")


class Conflict(APIError):
    """Duplicate resources. Rendered as 400 to match the public contract."""

    def __init__(self, message: str = "Conflict") -> None:
        super().__init__(message, status_code=HTTPStatus.BAD_REQUEST, code="conflict")


class Unauthorized(APIError):
    """401 when authentication fails."""

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message, status_code=HTTPStatus.UNAUTHORIZED, code="unauthorized")


class Forbidden(APIError):
    """403 when authorization denies access."""

    def __init__(self, message: str = "Forbidden") -> None:
        super().__init__(message, status_code=HTTPStatus.FORBIDDEN, code="forbidden")


def init_app(app: Flask) -> None:
    """
    Attach JSON error handlers to the Flask app.

    Notes
    -----
    - 4xx are logged as warnings without traceback.
    - 5xx are logged with ``exc_info``; clients only see a generic message.
    """

    @app.errorhandler(APIError)
    def handle_api_error(err: APIError):
        level = log.error if err.status_code >= 500 else log.warning
        level(
            "APIError: code=%s status=%s msg=%s request_id=%s",
            err.code,
            err.status_code,
            err.message,
            ensure_request_id(),
        )
        return _error_response(err.status_code, err.message, err.errors or None)

    @app.errorhandler(MarshmallowValidationError)
    def handle_validation_error(err: MarshmallowValidationError):
        errors = flatten_messages(err.messages)
        log.warning("ValidationError: fields=%s request_id=%s", len(errors), ensure_request_id())
        return _error_response(HTTPStatus.BAD_REQUEST, "Validation error", errors)

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = int(err.code or HTTPStatus.INTERNAL_SERVER_ERROR)
        if status == HTTPStatus.NOT_FOUND:
            message = "Route not found"
        elif status == HTTPStatus.TOO_MANY_REQUESTS:
            message = "Too many requests from this IP, please try again later."
        else:
            message = HTTPStatus(status).phrase
        level = log.error if status >= 500 else log.warning
        level(
            "HTTPException: status=%s path=%s request_id=%s",
            status,
            request.path,
            ensure_request_id(),
        )
        return _error_response(status, message)

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        # Do not leak raw DB error to clients
        log.error("IntegrityError: request_id=%s", ensure_request_id(), exc_info=True)
        return _error_response(HTTPStatus.BAD_REQUEST, "Resource conflict")

    @app.errorhandler(OperationalError)
    def handle_operational_error(err: OperationalError):
        log.error("OperationalError: request_id=%s", ensure_request_id(), exc_info=True)
        return _error_response(HTTPStatus.SERVICE_UNAVAILABLE, "Service temporarily unavailable")

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        # Unexpected server-side error; never leak internal details
        log.error("Unhandled exception: request_id=%s", ensure_request_id(), exc_info=True)
        return _error_response(HTTPStatus.INTERNAL_SERVER_ERROR, "Internal server error")
