"""Watch history persistence and the history read model."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import Select, func, select
from sqlalchemy.orm import aliased

from videotube.models.user import User
from videotube.models.video import Video
from videotube.models.watch_history import WatchHistoryEntry
from videotube.repositories.base import BaseRepository, Window


@dataclass(frozen=True, slots=True)
class HistoryOwnerRow:
    full_name: str
    username: str
    avatar: str


@dataclass(frozen=True, slots=True)
class HistoryRow:
    """One watched video with its owner projection (``None`` if the owner is gone)."""

    position: int
    video_id: int
    video_file: str
    thumbnail: str
    title: str
    description: str
    duration: float
    views: int
    is_published: bool
    created_at: datetime
    updated_at: datetime
    owner: HistoryOwnerRow | None


class WatchHistoryQuery:
    """Typed builder for a user's watch history.

    Entries are inner-joined to videos (deleted videos drop out) and
    outer-joined to the video owner. Order follows ``position``.
    """

    def __init__(self, user_id: int) -> None:
        self.user_id = user_id
        self._owner = aliased(User, name="owner")

    def statement(self, window: Window | None = None) -> Select:
        owner = self._owner
        stmt = (
            select(
                WatchHistoryEntry.position,
                Video.id,
                Video.video_file,
                Video.thumbnail,
                Video.title,
                Video.description,
                Video.duration,
                Video.views,
                Video.is_published,
                Video.created_at,
                Video.updated_at,
                owner.id,
                owner.full_name,
                owner.username,
                owner.avatar,
            )
            .select_from(WatchHistoryEntry)
            .join(Video, Video.id == WatchHistoryEntry.video_id)
            .outerjoin(owner, owner.id == Video.owner_id)
            .where(WatchHistoryEntry.user_id == self.user_id)
            .order_by(WatchHistoryEntry.position.asc())
        )
        if window is not None:
            stmt = stmt.limit(window.limit).offset(window.offset)
        return stmt

    @staticmethod
    def to_row(raw: Sequence) -> HistoryRow:
        (
            position,
            video_id,
            video_file,
            thumbnail,
            title,
            description,
            duration,
            views,
            is_published,
            created_at,
            updated_at,
            owner_id,
            owner_full_name,
            owner_username,
            owner_avatar,
        ) = raw
        owner = (
            HistoryOwnerRow(full_name=owner_full_name, username=owner_username, avatar=owner_avatar)
            if owner_id is not None
            else None
        )
        return HistoryRow(
            position=position,
            video_id=video_id,
            video_file=video_file,
            thumbnail=thumbnail,
            title=title,
            description=description,
            duration=duration,
            views=views,
            is_published=is_published,
            created_at=created_at,
            updated_at=updated_at,
            owner=owner,
        )


class WatchHistoryRepository(BaseRepository[WatchHistoryEntry]):
    """Append-only access to :class:`WatchHistoryEntry`."""

    model = WatchHistoryEntry

    def _filterable_fields(self):
        return {"user_id": WatchHistoryEntry.user_id, "video_id": WatchHistoryEntry.video_id}

    def next_position(self, user_id: int) -> int:
        stmt = select(func.max(WatchHistoryEntry.position)).where(
            WatchHistoryEntry.user_id == user_id
        )
        current = self.session.execute(stmt).scalar()
        return 0 if current is None else int(current) + 1

    def append(self, user_id: int, video_id: int) -> WatchHistoryEntry:
        """Add ``video_id`` at the end of the user's history (repeats allowed)."""
        entry = WatchHistoryEntry(
            user_id=user_id, video_id=video_id, position=self.next_position(user_id)
        )
        return self.add(entry)

    def list_rows(self, user_id: int, window: Window | None = None) -> list[HistoryRow]:
        """Return the ordered history rows, optionally sliced by ``window``."""
        query = WatchHistoryQuery(user_id)
        result = self.session.execute(query.statement(window))
        return [query.to_row(raw) for raw in result.all()]
