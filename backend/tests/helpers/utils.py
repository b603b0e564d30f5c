"""Tiny helpers shared across test modules."""

from __future__ import annotations

import io
from typing import Any

from videotube.services._shared.ports import MediaFile


def media(filename: str = "avatar.png", data: bytes = b"\x89PNG fake", content_type: str = "image/png") -> MediaFile:
    """Build an in-memory :class:`MediaFile` for service-level tests."""
    return MediaFile(stream=io.BytesIO(data), filename=filename, content_type=content_type)


def upload(filename: str = "avatar.png", data: bytes = b"\x89PNG fake") -> tuple[io.BytesIO, str]:
    """Return a ``(stream, filename)`` tuple accepted by the Flask test client."""
    return io.BytesIO(data), filename


def envelope(resp: Any, status: int) -> dict[str, Any]:
    """Assert the response status and envelope shape, then return the body.

    Parameters
    ----------
    resp:
        Flask test response.
    status:
        Expected HTTP status, also expected as ``statusCode`` in the body.
    """
    body = resp.get_json()
    assert resp.status_code == status, body
    assert body["statusCode"] == status
    assert body["success"] is (status < 400)
    assert isinstance(body["message"], str)
    return body


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
