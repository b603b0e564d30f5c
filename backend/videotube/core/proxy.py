"""Reverse-proxy awareness for the WSGI pipeline."""

from __future__ import annotations

from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix


def init_app(app: Flask) -> None:
    """Wrap ``app.wsgi_app`` with :class:`ProxyFix` when ``USE_PROXYFIX`` is on.

    Secure session cookies depend on the scheme seen by Flask, so behind a TLS
    terminating proxy ``X-Forwarded-Proto`` has to be honoured. The number of
    trusted hops comes from ``PROXY_HOPS`` (one by default).
    """
    if not app.config.get("USE_PROXYFIX", True):
        return
    hops = int(app.config.get("PROXY_HOPS", 1))
    app.wsgi_app = ProxyFix(  # type: ignore[method-assign]
        app.wsgi_app, x_for=hops, x_proto=hops, x_host=hops, x_prefix=hops
    )
