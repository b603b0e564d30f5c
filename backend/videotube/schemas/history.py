"""Watch history schemas."""

from __future__ import annotations

from marshmallow import Schema, fields


class VideoOwnerSchema(Schema):
    """Owner card: exactly ``fullName``, ``username`` and ``avatar``."""

    full_name = fields.String(data_key="fullName", required=True)
    username = fields.String(required=True)
    avatar = fields.String(required=True)


class WatchedVideoSchema(Schema):
    id = fields.Integer(required=True)
    video_file = fields.String(data_key="videoFile", required=True)
    thumbnail = fields.String(required=True)
    title = fields.String(required=True)
    description = fields.String(required=True)
    duration = fields.Float(required=True)
    views = fields.Integer(required=True)
    is_published = fields.Boolean(data_key="isPublished", required=True)
    created_at = fields.DateTime(data_key="createdAt")
    updated_at = fields.DateTime(data_key="updatedAt")
    owner = fields.Nested(VideoOwnerSchema, allow_none=True)
