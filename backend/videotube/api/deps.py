"""Shared API helpers: envelopes, session middleware, service wiring, cookies."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar, cast

from flask import Response, current_app, g, jsonify, request

from videotube.core.extensions import MEDIA_STORAGE_KEY, get_token_provider
from videotube.schemas.common import WindowQuerySchema
from videotube.services import (
    AuthService,
    AuthTokenConfig,
    ChannelService,
    IdentityService,
    ServiceContext,
    TokenPair,
    UserPublicOut,
    WatchHistoryService,
    WindowIn,
)
from videotube.services._shared.ports import MediaFile

F = TypeVar("F", bound=Callable[..., Any])

ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"

window_query_schema = WindowQuerySchema()


# ------------------------------- Responses -----------------------------------


def api_response(data: Any = None, message: str = "Success", *, status: int = 200) -> Response:
    """Return the success envelope ``{statusCode, data, message, success}``."""
    response = jsonify(
        {
            "statusCode": status,
            "data": data if data is not None else {},
            "message": message,
            "success": status < 400,
        }
    )
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Decorator logging handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request.endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]


# ------------------------------ Service wiring -------------------------------


def service_context() -> ServiceContext:
    user = getattr(g, "current_user", None)
    return ServiceContext(
        actor_id=user.id if user is not None else None,
        request_id=getattr(g, "request_id", None),
    )


def build_auth_service() -> AuthService:
    cfg = current_app.config
    return AuthService(
        token_provider=get_token_provider(),
        token_cfg=AuthTokenConfig(
            access_expires=cfg["ACCESS_TOKEN_EXPIRY"],
            refresh_expires=cfg["REFRESH_TOKEN_EXPIRY"],
        ),
    )


def build_identity_service(*, with_storage: bool = False) -> IdentityService:
    # Unconfigured storage surfaces as a service error once a file must be stored
    storage = current_app.extensions.get(MEDIA_STORAGE_KEY) if with_storage else None
    return IdentityService(media_storage=storage, ctx=service_context())


def build_channel_service() -> ChannelService:
    return ChannelService(ctx=service_context())


def build_history_service() -> WatchHistoryService:
    return WatchHistoryService(ctx=service_context())


# ---------------------------- Session middleware -----------------------------


def extract_access_token() -> str | None:
    """Cookie ``accessToken`` first, then ``Authorization: Bearer <token>``."""
    token = request.cookies.get(ACCESS_COOKIE)
    if token:
        return token
    header = request.headers.get("Authorization", "")
    scheme, _, value = header.partition(" ")
    if scheme.lower() == "bearer" and value.strip():
        return value.strip()
    return None


def require_auth(func: F) -> F:
    """Resolve the access token to a user and attach it to ``g.current_user``."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        g.current_user = build_auth_service().authenticate_access_token(extract_access_token())
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def current_user() -> UserPublicOut:
    """Return the identity attached by :func:`require_auth`."""
    return cast(UserPublicOut, g.current_user)


# --------------------------------- Cookies -----------------------------------


def _cookie_options() -> dict[str, Any]:
    cfg = current_app.config
    return {
        "httponly": True,
        "secure": bool(cfg.get("AUTH_COOKIE_SECURE", True)),
        "samesite": cfg.get("AUTH_COOKIE_SAMESITE", "Lax"),
        "path": "/",
    }


def set_auth_cookies(response: Response, tokens: TokenPair) -> Response:
    cfg = current_app.config
    opts = _cookie_options()
    response.set_cookie(
        ACCESS_COOKIE,
        tokens.access_token,
        max_age=int(cfg["ACCESS_TOKEN_EXPIRY"].total_seconds()),
        **opts,
    )
    response.set_cookie(
        REFRESH_COOKIE,
        tokens.refresh_token,
        max_age=int(cfg["REFRESH_TOKEN_EXPIRY"].total_seconds()),
        **opts,
    )
    return response


def clear_auth_cookies(response: Response) -> Response:
    opts = _cookie_options()
    response.delete_cookie(ACCESS_COOKIE, **opts)
    response.delete_cookie(REFRESH_COOKIE, **opts)
    return response


# ------------------------------ Request parsing ------------------------------


def parse_window() -> WindowIn:
    """Parse optional ``page``/``limit`` from ``request.args``."""
    data = window_query_schema.load(request.args)
    return WindowIn(page=data["page"], limit=data["limit"])


def media_file(field: str) -> MediaFile | None:
    """Wrap an uploaded multipart file, or ``None`` when absent or empty."""
    storage = request.files.get(field)
    if storage is None or not storage.filename:
        return None
    return MediaFile(
        stream=storage.stream,
        filename=storage.filename,
        content_type=storage.mimetype or "application/octet-stream",
    )
