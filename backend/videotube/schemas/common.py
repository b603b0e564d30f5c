"""Common Marshmallow schemas shared across resources."""

from __future__ import annotations

from typing import Any

from marshmallow import EXCLUDE, Schema, fields, post_load, validate


class WindowQuerySchema(Schema):
    """Optional ``page``/``limit`` query parameters.

    ``limit`` stays ``None`` when absent so callers can skip windowing.
    """

    class Meta:
        unknown = EXCLUDE

    def __init__(self, *, max_limit: int = 100, **kwargs: Any) -> None:
        self._max_limit = max_limit
        super().__init__(**kwargs)

    page = fields.Integer(load_default=1, validate=validate.Range(min=1, error="page must be >= 1"))
    limit = fields.Integer(
        load_default=None, validate=validate.Range(min=1, error="limit must be >= 1")
    )

    @post_load
    def clamp(self, data: dict[str, Any], **_: Any) -> dict[str, Any]:
        if data.get("limit") is not None:
            data["limit"] = min(data["limit"], self._max_limit)
        return data


class HealthSchema(Schema):
    status = fields.String(required=True)
    database = fields.String(required=True)
