from __future__ import annotations

import logging

from videotube.services._shared.base import BaseService
from videotube.services._shared.errors import NotFoundError, ValidationError
from videotube.services.channels.dto import ChannelProfileIn, ChannelProfileOut

logger = logging.getLogger(__name__)


class ChannelService(BaseService):
    """Read-only channel projections."""

    def get_profile(self, dto: ChannelProfileIn) -> ChannelProfileOut:
        """
        Return the profile of ``dto.username`` as seen by ``dto.viewer_id``.

        :raises ValidationError: "Username is missing" for a blank handle.
        :raises NotFoundError: "Channel does not exist" when no user matches.
        """
        username = (dto.username or "").strip().lower()
        if not username:
            raise ValidationError("Username is missing")

        with self.ro_uow() as uow:
            row = uow.channels.get_profile(username, dto.viewer_id)

        if row is None:
            raise NotFoundError("Channel", username, "Channel does not exist")

        logger.info(
            "channel.profile",
            extra={"channel": username, "user_id": dto.viewer_id},
        )
        return ChannelProfileOut(
            id=row.id,
            username=row.username,
            email=row.email,
            full_name=row.full_name,
            avatar=row.avatar,
            cover_image=row.cover_image,
            subscribers_count=row.subscribers_count,
            channels_subscribed_to_count=row.channels_subscribed_to_count,
            is_subscribed=row.is_subscribed,
        )
