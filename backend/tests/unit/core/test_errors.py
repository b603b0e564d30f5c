"""Tests for the error envelope and service error translation."""

from __future__ import annotations

import pytest

from videotube.core.errors import APIError, error_envelope
from videotube.services._shared.base import BaseService
from videotube.services._shared.errors import (
    ConflictError,
    InternalError,
    InvalidCredentialsError,
    InvalidTokenError,
    NotFoundError,
    ServiceError,
    UnauthorizedError,
    ValidationError,
)


def test_error_envelope_shape():
    assert error_envelope(status=409, message="Username already exists") == {
        "statusCode": 409,
        "message": "Username already exists",
        "success": False,
        "errors": [],
    }


def test_api_error_envelope_keeps_details():
    err = APIError("Bad input", 400, errors={"email": ["Email is not valid"]})
    body = err.to_envelope()
    assert body["errors"] == {"email": ["Email is not valid"]}
    assert body["statusCode"] == 400


@pytest.mark.parametrize(
    ("error", "status"),
    [
        (ServiceError("x"), 400),
        (ValidationError("x"), 400),
        (UnauthorizedError("x"), 401),
        (InvalidTokenError("x"), 401),
        (InvalidCredentialsError("x"), 400),
        (NotFoundError("User", 1, "User does not exist"), 404),
        (ConflictError("User", "Email already exists"), 409),
        (InternalError("x"), 500),
    ],
)
def test_translate_exceptions(error, status):
    translated = BaseService.translate_exceptions(error)
    assert translated.status_code == status
    assert translated.message == str(error)


def test_default_messages():
    assert str(UnauthorizedError()) == "Unauthorized request"
    assert str(NotFoundError("Channel", "dev")) != ""


def test_unknown_route_envelope(client):
    resp = client.get("/api/v1/nope")
    body = resp.get_json()
    assert resp.status_code == 404
    assert body["message"] == "Route '/api/v1/nope' not found"
    assert body["success"] is False
