"""Video model (only what accounts and history reference)."""

from __future__ import annotations

from sqlalchemy import Boolean, Float, ForeignKey, Integer, String, Text, text, true
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from videotube.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin
from .user import User


class Video(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Uploaded video.

    Fields
    ------
    video_file : str
        Public URL of the media file.
    thumbnail : str
        Public URL of the thumbnail.
    owner_id : int | None
        Uploading user. Set to ``NULL`` when the owner is deleted, so history
        entries keep the video with an empty owner.
    duration : float
        Length in seconds.
    views : int
        View counter (defaults to 0).
    is_published : bool
        Visibility flag (defaults to ``True``).
    """

    __tablename__ = "videos"

    video_file: Mapped[str] = mapped_column(String(512), nullable=False)
    thumbnail: Mapped[str] = mapped_column(String(512), nullable=False)
    owner_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    duration: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    views: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=text("0")
    )
    is_published: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=true()
    )

    owner: Mapped[User | None] = relationship(back_populates="videos")

    @validates("title")
    def _strip_title(self, key: str, value: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Title is required.")
        return value.strip()

    @validates("views", "duration")
    def _non_negative(self, key: str, value: float) -> float:
        if value is not None and value < 0:
            raise ValueError(f"{key} must be >= 0.")
        return value
