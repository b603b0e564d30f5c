"""Ordered watch history of a user."""

from __future__ import annotations

from sqlalchemy import ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from videotube.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin
from .user import User
from .video import Video


class WatchHistoryEntry(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    One slot of a user's watch history.

    Entries are ordered by ``position`` (0-based, unique per user). The same
    video may occupy several slots. ``video_id`` becomes ``NULL`` when the
    video is deleted; such entries are skipped when the history is read.
    """

    __tablename__ = "watch_history"

    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    video_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("videos.id", ondelete="SET NULL"), nullable=True
    )

    user: Mapped[User] = relationship(back_populates="watch_history")
    video: Mapped[Video | None] = relationship()

    __table_args__ = (
        UniqueConstraint("user_id", "position", name="uq_watch_history_user_position"),
    )
