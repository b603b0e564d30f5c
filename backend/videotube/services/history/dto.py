from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from videotube.services._shared.dto import WindowIn


@dataclass(frozen=True, slots=True)
class WatchHistoryIn:
    """
    :param user_id: Authenticated user.
    :param window: Optional page/limit; no windowing when ``limit`` is ``None``.
    """

    user_id: int
    window: WindowIn = field(default_factory=WindowIn)


@dataclass(frozen=True, slots=True)
class VideoOwnerOut:
    """Owner reduced to what a history card shows."""

    full_name: str
    username: str
    avatar: str


@dataclass(frozen=True, slots=True)
class WatchedVideoOut:
    """One history entry: the video plus its (possibly missing) owner."""

    id: int
    video_file: str
    thumbnail: str
    title: str
    description: str
    duration: float
    views: int
    is_published: bool
    created_at: datetime
    updated_at: datetime
    owner: VideoOwnerOut | None
