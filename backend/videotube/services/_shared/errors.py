"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic**: they never import Flask or HTTP
helpers. They are the contract between repositories, domain models and
application services. Translation to HTTP responses happens in
``videotube/core/errors.py`` via ``BaseService.translate_exceptions()``.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    PostgreSQL reports the constraint name; SQLite reports the column list
    (``UNIQUE constraint failed: users.email``), so callers may pass either.

    :param exc: The exception raised by SQLAlchemy during flush/commit.
    :param constraint_name: Constraint name or ``table.column`` fragment.
    :returns: ``True`` if the message mentions ``constraint_name``.
    """
    message = str(exc.orig).lower() if exc.orig else ""
    return constraint_name.lower() in message


# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors (maps to 400 unless refined).

    :param message: Client-safe description.
    """

    default_message = "Bad request"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


# --------------------------------------------------------------------------- #
# Specific domain-level errors
# --------------------------------------------------------------------------- #


class ValidationError(ServiceError):
    """Input is missing or malformed (e.g. blank required fields)."""

    default_message = "Validation failed"


class UnauthorizedError(ServiceError):
    """Authentication is missing or no longer valid."""

    default_message = "Unauthorized request"


class InvalidCredentialsError(UnauthorizedError):
    """A supplied password does not match. Reported as a bad request."""

    default_message = "Invalid user credentials"


class InvalidTokenError(UnauthorizedError):
    """A token failed signature, expiry, type or shape checks."""

    default_message = "Invalid token"


@dataclass(eq=False)
class NotFoundError(ServiceError):
    """
    Raised when an entity is not found.

    :param entity: Entity name (e.g., "User").
    :param key: Identifier or search key.
    :param detail: Optional client-facing message overriding the default.
    """

    entity: str
    key: str | int | None = None
    detail: str | None = None

    def __post_init__(self) -> None:
        ServiceError.__init__(self, self.detail or f"{self.entity} not found: {self.key}")

    def __str__(self) -> str:
        return self.message


@dataclass(eq=False)
class ConflictError(ServiceError):
    """
    Raised when a unique constraint or business rule conflict occurs.

    :param entity: Entity name (e.g., "User").
    :param detail: Short human-readable explanation (used as the message).
    """

    entity: str
    detail: str

    def __post_init__(self) -> None:
        ServiceError.__init__(self, self.detail)

    def __str__(self) -> str:
        return self.message


class InternalError(ServiceError):
    """A dependency failed in a way the client cannot fix (maps to 500)."""

    default_message = "Internal server error"
