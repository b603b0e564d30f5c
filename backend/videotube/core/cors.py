"""CORS policy for the browser frontend."""

from __future__ import annotations

from flask import Flask
from flask_cors import CORS

from videotube.core.logger import REQUEST_ID_HEADER


def _split_origins(raw: str | list[str] | None) -> list[str]:
    if raw is None:
        return []
    if isinstance(raw, str):
        raw = raw.split(",")
    return [o.strip() for o in raw if o and o.strip()]


def init_app(app: Flask) -> None:
    """Configure CORS for ``/api/*`` from ``CORS_ORIGINS``.

    Session cookies travel cross-origin, so credentials are enabled whenever
    explicit origins are listed. A blank value or ``"*"`` opens every origin
    and turns credential support off (browsers reject ``*`` with credentials).

    :param app: Application whose ``CORS_ORIGINS`` and ``CORS_MAX_AGE``
        settings are consulted.
    """
    origins = _split_origins(app.config.get("CORS_ORIGINS"))
    wildcard = not origins or origins == ["*"]

    CORS(
        app,
        resources={r"/api/*": {"origins": "*" if wildcard else origins}},
        supports_credentials=not wildcard,
        expose_headers=[REQUEST_ID_HEADER],
        max_age=app.config.get("CORS_MAX_AGE", 600),
    )
