from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Protocol

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


class TokenProvider(Protocol):
    """
    Port for signing and verifying session tokens.

    Each token type (``"access"``, ``"refresh"``) is signed with its own
    secret. ``decode`` must reject a token signed for the other type.
    """

    def encode(
        self,
        claims: dict[str, Any],
        *,
        token_type: str,
        expires_delta: timedelta,
        now: datetime | None = None,
    ) -> str:
        """
        Sign ``claims`` plus ``type``, ``iat`` and ``exp``.

        :param claims: Payload claims (``sub`` must be a string).
        :param token_type: ``"access"`` or ``"refresh"``; selects the secret.
        :param expires_delta: Lifetime added to ``now``.
        :param now: Issue time (UTC); defaults to the current time.
        """
        ...

    def decode(self, token: str, *, token_type: str) -> dict[str, Any]:
        """
        Verify signature, expiry and ``type`` claim.

        :raises videotube.services._shared.errors.InvalidTokenError: On any failure.
        """
        ...
