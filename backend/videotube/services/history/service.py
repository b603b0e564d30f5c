from __future__ import annotations

import logging

from videotube.repositories.watch_history import HistoryRow
from videotube.services._shared.base import BaseService
from videotube.services.history.dto import VideoOwnerOut, WatchedVideoOut, WatchHistoryIn

logger = logging.getLogger(__name__)


def _row_to_out(row: HistoryRow) -> WatchedVideoOut:
    owner = None
    if row.owner is not None:
        owner = VideoOwnerOut(
            full_name=row.owner.full_name,
            username=row.owner.username,
            avatar=row.owner.avatar,
        )
    return WatchedVideoOut(
        id=row.video_id,
        video_file=row.video_file,
        thumbnail=row.thumbnail,
        title=row.title,
        description=row.description,
        duration=row.duration,
        views=row.views,
        is_published=row.is_published,
        created_at=row.created_at,
        updated_at=row.updated_at,
        owner=owner,
    )


class WatchHistoryService(BaseService):
    """Read-only watch history projection."""

    def get_history(self, dto: WatchHistoryIn) -> list[WatchedVideoOut]:
        """
        Return watched videos in stored order.

        Entries pointing at deleted videos are skipped; repeats are kept.
        """
        window = self.ensure_window(dto.window.page, dto.window.limit)
        with self.ro_uow() as uow:
            rows = uow.watch_history.list_rows(dto.user_id, window)

        logger.info("history.listed", extra={"user_id": dto.user_id, "count": len(rows)})
        return [_row_to_out(row) for row in rows]

    def record_view(self, user_id: int, video_id: int) -> None:
        """Append ``video_id`` to the user's history."""
        with self.rw_uow() as uow:
            uow.watch_history.append(user_id, video_id)
