"""
videotube.services._shared.ports
================================

*Ports* (hexagonal interfaces) the service layer depends on.

- :mod:`token_provider`: :class:`~.TokenProvider`, signing and verifying
  access and refresh tokens.
- :mod:`media_storage`: :class:`~.MediaStorage`, storing avatars and cover
  images, plus :class:`~.InMemoryMediaStorage` for tests.

Concrete adapters live under ``videotube.infra``.
"""

from __future__ import annotations

from .media_storage import (
    InMemoryMediaStorage,
    MediaFile,
    MediaStorage,
    MediaStorageError,
    StoredMedia,
)
from .token_provider import ACCESS_TOKEN_TYPE, REFRESH_TOKEN_TYPE, TokenProvider

__all__ = [
    "TokenProvider",
    "ACCESS_TOKEN_TYPE",
    "REFRESH_TOKEN_TYPE",
    "MediaStorage",
    "MediaStorageError",
    "MediaFile",
    "StoredMedia",
    "InMemoryMediaStorage",
]
