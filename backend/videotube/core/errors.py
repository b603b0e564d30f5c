"""Centralized JSON error handling with the API failure envelope.

Every handled failure renders as::

    {"statusCode": 401, "message": "...", "success": false, "errors": [...]}

``errors`` carries structured details (validation messages) and is an empty
list otherwise. The request id travels in the ``X-Request-ID`` header.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, jsonify, request
from marshmallow import ValidationError as MarshmallowValidationError
from sqlalchemy.exc import IntegrityError, OperationalError
from werkzeug.exceptions import HTTPException

from videotube.core.logger import ensure_request_id

log = logging.getLogger(__name__)


def error_envelope(
    *, status: int, message: str, errors: list[Any] | dict[str, Any] | None = None
) -> dict[str, Any]:
    """Build the failure body shared by every error response.

    :param status: HTTP status code mirrored in ``statusCode``.
    :param message: Human-readable summary, safe for clients.
    :param errors: Optional structured details.
    :returns: Envelope dictionary.
    """
    return {
        "statusCode": int(status),
        "message": message,
        "success": False,
        "errors": errors if errors else [],
    }


def _envelope_response(body: dict[str, Any]) -> Response:
    resp = jsonify(body)
    resp.status_code = body["statusCode"]
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
    errors : list | dict | None, optional
        Structured payload (e.g., validation messages) included in the body.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 400,
        errors: list[Any] | dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = int(status_code)
        self.errors = errors

    def to_envelope(self) -> dict[str, Any]:
        """Serialize into the failure envelope."""
        return error_envelope(status=self.status_code, message=self.message, errors=self.errors)


class BadRequest(APIError):
    """400 for malformed or incomplete input."""

    def __init__(self, message: str = "Bad request", errors: Any = None) -> None:
        super().__init__(message, status_code=HTTPStatus.BAD_REQUEST, errors=errors)


class Unauthorized(APIError):
    """401 when authentication fails."""

    def __init__(self, message: str = "Unauthorized request") -> None:
        super().__init__(message, status_code=HTTPStatus.UNAUTHORIZED)


class NotFound(APIError):
    """404 when resources are missing."""

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message, status_code=HTTPStatus.NOT_FOUND)


class Conflict(APIError):
    """409 for uniqueness collisions."""

    def __init__(self, message: str = "Conflict") -> None:
        super().__init__(message, status_code=HTTPStatus.CONFLICT)


class InternalServerError(APIError):
    """500 for failures clients cannot fix (message stays generic)."""

    def __init__(self, message: str = "Internal server error") -> None:
        super().__init__(message, status_code=HTTPStatus.INTERNAL_SERVER_ERROR)


def _log_api_error(err: APIError) -> None:
    # 4xx -> warning; 5xx -> error
    level = log.error if err.status_code >= 500 else log.warning
    level(
        "APIError: status=%s msg=%s request_id=%s",
        err.status_code,
        err.message,
        ensure_request_id(),
    )


def init_app(app: Flask) -> None:
    """
    Attach JSON error handlers to the Flask app.

    Notes
    -----
    - Service-layer errors are translated by
      :meth:`videotube.services._shared.base.BaseService.translate_exceptions`.
    - 5xx are logged with ``exc_info``; 4xx as warnings.
    - Unexpected exceptions never leak internals to clients.
    """
    from videotube.services._shared.base import BaseService
    from videotube.services._shared.errors import ServiceError

    @app.errorhandler(APIError)
    def handle_api_error(err: APIError):
        _log_api_error(err)
        return _envelope_response(err.to_envelope())

    @app.errorhandler(ServiceError)
    def handle_service_error(err: ServiceError):
        translated = BaseService.translate_exceptions(err)
        if translated.status_code >= 500:
            log.error("ServiceError: %s", err, exc_info=err)
        return handle_api_error(translated)

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = int(err.code or HTTPStatus.INTERNAL_SERVER_ERROR)
        message = (err.description or HTTPStatus(status).phrase).strip()
        if status == HTTPStatus.NOT_FOUND:
            message = f"Route '{request.path}' not found"
        level = log.error if status >= 500 else log.warning
        level(
            "HTTPException: status=%s detail=%s request_id=%s",
            status,
            message,
            ensure_request_id(),
        )
        return _envelope_response(error_envelope(status=status, message=message))

    @app.errorhandler(MarshmallowValidationError)
    def handle_validation_error(err: MarshmallowValidationError):
        messages = err.normalized_messages()
        body = error_envelope(
            status=HTTPStatus.BAD_REQUEST,
            message=_first_message(messages) or "Validation failed",
            errors=messages,
        )
        log.warning("ValidationError: request_id=%s", ensure_request_id())
        return _envelope_response(body)

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        # Do not leak raw DB error to clients
        log.error("IntegrityError: request_id=%s", ensure_request_id(), exc_info=err)
        return _envelope_response(
            error_envelope(status=HTTPStatus.CONFLICT, message="Resource conflict")
        )

    @app.errorhandler(OperationalError)
    def handle_operational_error(err: OperationalError):
        log.error("OperationalError: request_id=%s", ensure_request_id(), exc_info=err)
        return _envelope_response(
            error_envelope(
                status=HTTPStatus.SERVICE_UNAVAILABLE,
                message="Service temporarily unavailable",
            )
        )

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        log.error("Unhandled exception: request_id=%s", ensure_request_id(), exc_info=err)
        return _envelope_response(
            error_envelope(
                status=HTTPStatus.INTERNAL_SERVER_ERROR,
                message="Internal server error",
            )
        )


def _first_message(messages: Any) -> str | None:
    """Return the first leaf message of a marshmallow error structure."""
    if isinstance(messages, str):
        return messages
    if isinstance(messages, list):
        for item in messages:
            found = _first_message(item)
            if found:
                return found
        return None
    if isinstance(messages, dict):
        for value in messages.values():
            found = _first_message(value)
            if found:
                return found
    return None
