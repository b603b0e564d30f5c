"""Channel profile schema."""

from __future__ import annotations

from marshmallow import Schema, fields


class ChannelProfileSchema(Schema):
    id = fields.Integer(required=True)
    username = fields.String(required=True)
    email = fields.String(required=True)
    full_name = fields.String(data_key="fullName", required=True)
    avatar = fields.String(required=True)
    cover_image = fields.String(data_key="coverImage", allow_none=True)
    subscribers_count = fields.Integer(data_key="subscribersCount", required=True)
    channels_subscribed_to_count = fields.Integer(
        data_key="channelsSubscribedToCount", required=True
    )
    is_subscribed = fields.Boolean(data_key="isSubscribed", required=True)
