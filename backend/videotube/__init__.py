"""VideoTube backend package.

Exposes :func:`videotube.factory.create_app` at package level so WSGI servers
and tests can ``from videotube import create_app``.
"""

from __future__ import annotations

from .factory import create_app

__all__ = ["create_app"]
