"""Repository package exposing persistence-layer access for all domain models."""

from __future__ import annotations

from videotube.repositories.base import BaseRepository, SessionBound, Window
from videotube.repositories.channel import (
    ChannelProfileQuery,
    ChannelProfileRow,
    ChannelRepository,
)
from videotube.repositories.user import UserRepository
from videotube.repositories.watch_history import (
    HistoryOwnerRow,
    HistoryRow,
    WatchHistoryQuery,
    WatchHistoryRepository,
)

__all__ = [
    # Base
    "BaseRepository",
    "SessionBound",
    "Window",
    # Domain
    "UserRepository",
    "WatchHistoryRepository",
    "ChannelRepository",
    # Read models
    "ChannelProfileQuery",
    "ChannelProfileRow",
    "WatchHistoryQuery",
    "HistoryRow",
    "HistoryOwnerRow",
]
