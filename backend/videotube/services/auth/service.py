from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any
from uuid import uuid4

from sqlalchemy.exc import SQLAlchemyError

from videotube.models.user import User
from videotube.repositories.user import UserRepository
from videotube.services._shared.base import BaseService
from videotube.services._shared.dto import UserPublicOut, user_to_public
from videotube.services._shared.errors import (
    InternalError,
    InvalidCredentialsError,
    InvalidTokenError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from videotube.services._shared.ports import (
    ACCESS_TOKEN_TYPE,
    REFRESH_TOKEN_TYPE,
    TokenProvider,
)
from videotube.services.auth.dto import (
    AuthTokenConfig,
    LoginIn,
    LoginOut,
    RefreshIn,
    TokenPair,
)

logger = logging.getLogger(__name__)

USER_NOT_FOUND = "User does not exist"
INVALID_CREDENTIALS = "Invalid user credentials"
TOKEN_GENERATION_FAILED = "Something went wrong while generating tokens"
REFRESH_REQUIRED = "Refresh token is required"
REFRESH_INVALID = "Invalid or expired refresh token"
ACCESS_MISSING = "Unauthorized request"
ACCESS_INVALID = "Invalid access token"


class AuthService(BaseService):
    """
    Session lifecycle service (login / refresh / logout / access checks).

    A user holds at most one live refresh token, stored on ``User.refresh_token``.
    Logging in again or refreshing overwrites it; logging out clears it. A
    refresh token is honoured only while it equals the stored value, so every
    rotation invalidates the previous token.
    """

    def __init__(
        self,
        *,
        token_provider: TokenProvider,
        token_cfg: AuthTokenConfig | None = None,
        clock: Any = None,
    ) -> None:
        """
        :param token_provider: Adapter signing/verifying JWTs.
        :param token_cfg: Access/refresh lifetimes.
        :param clock: Optional zero-arg callable returning an aware UTC
            ``datetime``; defaults to :meth:`BaseService.now_utc`.
        """
        super().__init__()
        self.tokens = token_provider
        self.cfg = token_cfg or AuthTokenConfig(
            access_expires=timedelta(days=1),
            refresh_expires=timedelta(days=10),
        )
        self._clock = clock or self.now_utc

    # ------------------------------------------------------------------ #
    # Token issuance
    # ------------------------------------------------------------------ #

    def issue_access_token(self, user: User | UserPublicOut, *, now: datetime | None = None) -> str:
        """
        Sign an access token carrying the user's public identity.

        Same user, secret and clock always give the same token.
        """
        claims = {
            "sub": str(user.id),
            "username": user.username,
            "fullName": user.full_name,
            "email": user.email,
        }
        return self.tokens.encode(
            claims,
            token_type=ACCESS_TOKEN_TYPE,
            expires_delta=self.cfg.access_expires,
            now=now or self._clock(),
        )

    def issue_refresh_token(self, user_id: int, *, now: datetime | None = None) -> str:
        """
        Sign a refresh token for ``user_id``.

        A random ``jti`` keeps two tokens issued in the same second distinct.
        """
        claims = {"sub": str(user_id), "jti": uuid4().hex}
        return self.tokens.encode(
            claims,
            token_type=REFRESH_TOKEN_TYPE,
            expires_delta=self.cfg.refresh_expires,
            now=now or self._clock(),
        )

    def issue_token_pair(self, user_id: int) -> TokenPair:
        """
        Issue both tokens and store the refresh token on the user.

        :raises NotFoundError: If the user does not exist.
        :raises InternalError: If the refresh token cannot be persisted.
        """
        try:
            with self.rw_uow() as uow:
                repo: UserRepository = uow.users
                user = repo.get(user_id)
                if user is None:
                    raise NotFoundError("User", user_id, USER_NOT_FOUND)
                pair = TokenPair(
                    access_token=self.issue_access_token(user),
                    refresh_token=self.issue_refresh_token(user.id),
                )
                repo.set_refresh_token(user.id, pair.refresh_token)
        except SQLAlchemyError as exc:
            logger.error("auth.token_pair_failed", extra={"user_id": user_id}, exc_info=exc)
            raise InternalError(TOKEN_GENERATION_FAILED) from exc
        return pair

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> LoginOut:
        """
        Verify credentials and open a new session.

        :raises ValidationError: If neither username nor email is given.
        :raises NotFoundError: If no user matches.
        :raises InvalidCredentialsError: If the password does not match.
        """
        if not (dto.username and dto.username.strip()) and not (dto.email and dto.email.strip()):
            raise ValidationError("Username or email is required")
        if not dto.password:
            raise ValidationError("Password is required")

        with self.ro_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get_by_login(username=dto.username, email=dto.email)
            if user is None:
                raise NotFoundError("User", dto.username or dto.email, USER_NOT_FOUND)
            if not user.verify_password(dto.password):
                logger.warning("auth.login_rejected", extra={"user_id": user.id})
                raise InvalidCredentialsError(INVALID_CREDENTIALS)
            user_id = user.id

        tokens = self.issue_token_pair(user_id)
        with self.ro_uow() as uow:
            public = user_to_public(uow.users.get(user_id))

        logger.info("auth.login", extra={"user_id": user_id})
        return LoginOut(user=public, tokens=tokens)

    # ------------------------------------------------------------------ #
    # Refresh with rotation
    # ------------------------------------------------------------------ #

    def refresh(self, dto: RefreshIn) -> TokenPair:
        """
        Exchange the current refresh token for a new pair.

        Every failure (bad signature, expiry, wrong type, unknown user, token
        superseded or revoked) collapses to one :class:`UnauthorizedError`.

        :raises ValidationError: If no token was supplied.
        """
        token = (dto.refresh_token or "").strip()
        if not token:
            raise ValidationError(REFRESH_REQUIRED)

        try:
            payload = self.tokens.decode(token, token_type=REFRESH_TOKEN_TYPE)
        except InvalidTokenError as exc:
            raise UnauthorizedError(REFRESH_INVALID) from exc
        user_id = self._coerce_user_id(payload.get("sub"), REFRESH_INVALID)

        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get(user_id)
            if user is None or user.refresh_token != token:
                logger.warning("auth.refresh_rejected", extra={"user_id": user_id})
                raise UnauthorizedError(REFRESH_INVALID)
            pair = TokenPair(
                access_token=self.issue_access_token(user),
                refresh_token=self.issue_refresh_token(user.id),
            )
            if not repo.rotate_refresh_token(user.id, token, pair.refresh_token):
                raise UnauthorizedError(REFRESH_INVALID)

        logger.info("auth.refresh", extra={"user_id": user_id})
        return pair

    # ------------------------------------------------------------------ #
    # Logout
    # ------------------------------------------------------------------ #

    def logout(self, user_id: int) -> None:
        """Clear the stored refresh token; outstanding access tokens live until expiry."""
        with self.rw_uow() as uow:
            uow.users.clear_refresh_token(user_id)
        logger.info("auth.logout", extra={"user_id": user_id})

    # ------------------------------------------------------------------ #
    # Access token verification (session middleware core)
    # ------------------------------------------------------------------ #

    def authenticate_access_token(self, token: str | None) -> UserPublicOut:
        """
        Resolve an access token to the current user.

        :raises UnauthorizedError: "Unauthorized request" when absent,
            "Invalid access token" when it fails verification or the user is gone.
        """
        if not token or not token.strip():
            raise UnauthorizedError(ACCESS_MISSING)
        try:
            payload = self.tokens.decode(token.strip(), token_type=ACCESS_TOKEN_TYPE)
        except InvalidTokenError as exc:
            raise UnauthorizedError(ACCESS_INVALID) from exc
        user_id = self._coerce_user_id(payload.get("sub"), ACCESS_INVALID)

        with self.ro_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise UnauthorizedError(ACCESS_INVALID)
            return user_to_public(user)

    # ------------------------------------------------------------------ #
    # Utilities
    # ------------------------------------------------------------------ #

    @staticmethod
    def _coerce_user_id(subject: Any, message: str) -> int:
        """Ensure the JWT subject can be treated as an integer user id."""
        if isinstance(subject, int):
            return subject
        if isinstance(subject, str) and subject.isdigit():
            return int(subject)
        raise UnauthorizedError(message)
