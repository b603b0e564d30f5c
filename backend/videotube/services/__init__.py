"""Service layer public API.

Callers import from :mod:`videotube.services` without knowing the internal
layout.

Re-exports
----------
- Base primitives: :class:`BaseService`, :class:`ServiceContext`
- :class:`AuthService` with :class:`LoginIn`, :class:`RefreshIn`,
  :class:`TokenPair`, :class:`LoginOut`, :class:`AuthTokenConfig`
- :class:`IdentityService` with :class:`UserRegisterIn`,
  :class:`UserPasswordChangeIn`, :class:`UserImageUpdateIn`
- :class:`ChannelService` with :class:`ChannelProfileIn`, :class:`ChannelProfileOut`
- :class:`WatchHistoryService` with :class:`WatchHistoryIn`, :class:`WatchedVideoOut`
- Shared DTOs: :class:`UserPublicOut`, :class:`WindowIn`
"""

from __future__ import annotations

from videotube.services._shared.base import BaseService, ServiceContext
from videotube.services._shared.dto import UserPublicOut, WindowIn
from videotube.services.auth.dto import (
    AuthTokenConfig,
    LoginIn,
    LoginOut,
    RefreshIn,
    TokenPair,
)
from videotube.services.auth.service import AuthService
from videotube.services.channels.dto import ChannelProfileIn, ChannelProfileOut
from videotube.services.channels.service import ChannelService
from videotube.services.history.dto import (
    VideoOwnerOut,
    WatchedVideoOut,
    WatchHistoryIn,
)
from videotube.services.history.service import WatchHistoryService
from videotube.services.identity.dto import (
    UserImageUpdateIn,
    UserPasswordChangeIn,
    UserRegisterIn,
)
from videotube.services.identity.service import IdentityService

__all__ = [
    # Base
    "BaseService",
    "ServiceContext",
    "UserPublicOut",
    "WindowIn",
    # Auth
    "AuthService",
    "AuthTokenConfig",
    "LoginIn",
    "LoginOut",
    "RefreshIn",
    "TokenPair",
    # Identity
    "IdentityService",
    "UserRegisterIn",
    "UserPasswordChangeIn",
    "UserImageUpdateIn",
    # Channels
    "ChannelService",
    "ChannelProfileIn",
    "ChannelProfileOut",
    # History
    "WatchHistoryService",
    "WatchHistoryIn",
    "WatchedVideoOut",
    "VideoOwnerOut",
]
