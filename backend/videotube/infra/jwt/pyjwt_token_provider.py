from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

from videotube.services._shared.errors import InvalidTokenError
from videotube.services._shared.ports import (
    ACCESS_TOKEN_TYPE,
    REFRESH_TOKEN_TYPE,
    TokenProvider,
)


@dataclass(slots=True)
class PyJWTTokenProvider(TokenProvider):
    """
    Adapter signing HMAC JWTs with PyJWT.

    Access and refresh tokens use separate secrets, so a refresh token never
    verifies as an access token (and vice versa) even before the ``type``
    claim is checked.

    .. note::
       No Flask context is needed; the provider is built once per app from
       its config (:meth:`from_config`).
    """

    access_secret: str
    refresh_secret: str
    algorithm: str = "HS256"
    leeway: int = 0

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> PyJWTTokenProvider:
        return cls(
            access_secret=config["ACCESS_TOKEN_SECRET"],
            refresh_secret=config["REFRESH_TOKEN_SECRET"],
            algorithm=config.get("JWT_ALGORITHM", "HS256"),
        )

    def _secret(self, token_type: str) -> str:
        if token_type == ACCESS_TOKEN_TYPE:
            return self.access_secret
        if token_type == REFRESH_TOKEN_TYPE:
            return self.refresh_secret
        raise ValueError(f"Unknown token type: {token_type!r}")

    def encode(
        self,
        claims: dict[str, Any],
        *,
        token_type: str,
        expires_delta: timedelta,
        now: datetime | None = None,
    ) -> str:
        issued = (now or datetime.now(UTC)).replace(microsecond=0)
        payload = dict(claims)
        payload.update(
            {
                "type": token_type,
                "iat": int(issued.timestamp()),
                "exp": int((issued + expires_delta).timestamp()),
            }
        )
        return jwt.encode(payload, self._secret(token_type), algorithm=self.algorithm)

    def decode(self, token: str, *, token_type: str) -> dict[str, Any]:
        if not token or not isinstance(token, str):
            raise InvalidTokenError()
        try:
            payload = jwt.decode(
                token,
                self._secret(token_type),
                algorithms=[self.algorithm],
                options={"require": ["exp", "iat", "sub"]},
                leeway=self.leeway,
            )
        except jwt.PyJWTError as exc:
            raise InvalidTokenError(f"Invalid {token_type} token") from exc
        if payload.get("type") != token_type:
            raise InvalidTokenError(f"Invalid {token_type} token")
        return payload
