"""User, session, channel and history endpoints."""

from __future__ import annotations

from flask import Blueprint, request

from videotube.api.deps import (
    REFRESH_COOKIE,
    api_response,
    build_auth_service,
    build_channel_service,
    build_history_service,
    build_identity_service,
    clear_auth_cookies,
    current_user,
    media_file,
    parse_window,
    require_auth,
    set_auth_cookies,
    timing,
)
from videotube.schemas import (
    ChangePasswordSchema,
    ChannelProfileSchema,
    LoginResponseSchema,
    LoginSchema,
    RefreshTokenSchema,
    RegisterSchema,
    TokenPairSchema,
    UserSchema,
    WatchedVideoSchema,
)
from videotube.services import (
    ChannelProfileIn,
    LoginIn,
    RefreshIn,
    UserImageUpdateIn,
    UserPasswordChangeIn,
    UserRegisterIn,
    WatchHistoryIn,
)

bp = Blueprint("users", __name__)

register_schema = RegisterSchema()
login_schema = LoginSchema()
change_password_schema = ChangePasswordSchema()
refresh_schema = RefreshTokenSchema()
user_schema = UserSchema()
login_response_schema = LoginResponseSchema()
token_pair_schema = TokenPairSchema()
channel_schema = ChannelProfileSchema()
history_schema = WatchedVideoSchema(many=True)


def _payload() -> dict:
    """JSON body, falling back to form fields."""
    body = request.get_json(silent=True)
    if isinstance(body, dict):
        return body
    return request.form.to_dict()


# ------------------------------- Anonymous -----------------------------------


@bp.post("/register")
@timing
def register():
    """Create an account from multipart form data (avatar required)."""
    data = register_schema.load(request.form.to_dict())
    service = build_identity_service(with_storage=True)
    user = service.register_user(
        UserRegisterIn(
            username=data["username"],
            full_name=data["full_name"],
            email=data["email"],
            password=data["password"],
            avatar=media_file("avatar"),
            cover_image=media_file("coverImage"),
        )
    )
    return api_response(user_schema.dump(user), "User registered successfully")


@bp.post("/login")
@timing
def login():
    """Authenticate with username or email and open a session."""
    data = login_schema.load(_payload())
    result = build_auth_service().login(
        LoginIn(password=data["password"], username=data["username"], email=data["email"])
    )
    response = api_response(login_response_schema.dump(result), "User logged in successfully")
    return set_auth_cookies(response, result.tokens)


@bp.post("/refresh-token")
@timing
def refresh_token():
    """Rotate the refresh token (cookie first, then body)."""
    token = request.cookies.get(REFRESH_COOKIE)
    if not token:
        token = refresh_schema.load(_payload())["refresh_token"]
    tokens = build_auth_service().refresh(RefreshIn(refresh_token=token))
    response = api_response(token_pair_schema.dump(tokens), "Access token refreshed")
    return set_auth_cookies(response, tokens)


# ------------------------------ Authenticated --------------------------------


@bp.post("/logout")
@require_auth
@timing
def logout():
    build_auth_service().logout(current_user().id)
    return clear_auth_cookies(api_response({}, "User logged out"))


@bp.post("/changePassword")
@require_auth
@timing
def change_password():
    data = change_password_schema.load(_payload())
    build_identity_service().change_password(
        UserPasswordChangeIn(
            user_id=current_user().id,
            old_password=data["old_password"],
            new_password=data["new_password"],
        )
    )
    return api_response({}, "Password changed successfully")


@bp.get("/getCurrentUser")
@require_auth
@timing
def get_current_user():
    return api_response(user_schema.dump(current_user()), "Current user fetched successfully")


@bp.patch("/updateAvatar")
@require_auth
@timing
def update_avatar():
    user = build_identity_service(with_storage=True).update_avatar(
        UserImageUpdateIn(user_id=current_user().id, file=media_file("avatar"))
    )
    return api_response(user_schema.dump(user), "Avatar updated successfully")


@bp.post("/updateCoverImage")
@require_auth
@timing
def update_cover_image():
    user = build_identity_service(with_storage=True).update_cover_image(
        UserImageUpdateIn(user_id=current_user().id, file=media_file("coverImage"))
    )
    return api_response(user_schema.dump(user), "Cover image updated successfully")


@bp.get("/channel/<username>")
@require_auth
@timing
def channel_profile(username: str):
    profile = build_channel_service().get_profile(
        ChannelProfileIn(username=username, viewer_id=current_user().id)
    )
    return api_response(channel_schema.dump(profile), "User channel fetched successfully")


@bp.get("/history")
@require_auth
@timing
def watch_history():
    items = build_history_service().get_history(
        WatchHistoryIn(user_id=current_user().id, window=parse_window())
    )
    return api_response(history_schema.dump(items), "Watch history fetched successfully")
