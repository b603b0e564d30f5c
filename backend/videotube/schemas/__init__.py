"""Convenience exports for application schemas."""

from __future__ import annotations

from .channel import ChannelProfileSchema
from .common import HealthSchema, WindowQuerySchema
from .history import VideoOwnerSchema, WatchedVideoSchema
from .user import (
    ChangePasswordSchema,
    LoginResponseSchema,
    LoginSchema,
    RefreshTokenSchema,
    RegisterSchema,
    TokenPairSchema,
    UserSchema,
)

__all__ = [
    "ChangePasswordSchema",
    "ChannelProfileSchema",
    "HealthSchema",
    "LoginResponseSchema",
    "LoginSchema",
    "RefreshTokenSchema",
    "RegisterSchema",
    "TokenPairSchema",
    "UserSchema",
    "VideoOwnerSchema",
    "WatchedVideoSchema",
    "WindowQuerySchema",
]
