"""Bridge service-layer errors to the JSON error envelope."""

from __future__ import annotations

import logging

from flask import Flask, Response, jsonify

from taskmanager.core.errors import APIError
from taskmanager.core.logger import ensure_request_id
from taskmanager.services._shared.base import BaseService
from taskmanager.services._shared.errors import ServiceError

log = logging.getLogger(__name__)


def register_service_error_handler(app: Flask) -> None:
    """Render any :class:`ServiceError` through ``BaseService.translate_exceptions``."""

    @app.errorhandler(ServiceError)
    def _service_error_handler(err: ServiceError) -> Response:
        translated = BaseService.translate_exceptions(err)
        if not isinstance(translated, APIError):  # pragma: no cover - every ServiceError maps
            raise err
        log.warning(
            "ServiceError: type=%s status=%s request_id=%s",
            type(err).__name__,
            translated.status_code,
            ensure_request_id(),
        )
        response = jsonify(translated.to_envelope())
        response.status_code = translated.status_code
        return response
