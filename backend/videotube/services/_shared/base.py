from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime

from videotube.core import errors as api_errors
from videotube.repositories.base import Window
from videotube.services._shared.errors import (
    ConflictError,
    InternalError,
    InvalidCredentialsError,
    NotFoundError,
    ServiceError,
    UnauthorizedError,
)
from videotube.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)


@dataclass(slots=True)
class ServiceContext:
    """
    Carry request-scoped data into services.

    :param actor_id: Authenticated user identifier.
    :param request_id: Correlation id for logging/tracing.
    """

    actor_id: int | None = None
    request_id: str | None = None


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide read-only and read-write units of work.
    * Centralize error translation (:meth:`translate_exceptions`).
    * Offer shared helpers (windowing, UTC clock).

    Services never touch the global session directly; always through a UoW.
    """

    def __init__(self, *, ctx: ServiceContext | None = None) -> None:
        """
        :param ctx: Optional request-scoped context (actor, tracing).
        """
        self.ctx = ctx or ServiceContext()

    # -------------------------- UoW helpers ---------------------------------

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        """Create a read-write Unit of Work."""
        return SQLAlchemyUnitOfWork()

    def ro_uow(self, *, enforce_db_readonly: bool = True) -> SQLAlchemyReadOnlyUnitOfWork:
        """
        Create a read-only Unit of Work.

        :param enforce_db_readonly: Apply ``SET TRANSACTION READ ONLY`` when supported.
        """
        return SQLAlchemyReadOnlyUnitOfWork(enforce_db_readonly=enforce_db_readonly)

    # ----------------------- Validation utilities ---------------------------

    @staticmethod
    def ensure_window(page: int | None, limit: int | None, *, max_limit: int = 100) -> Window | None:
        """
        Build a :class:`Window` when ``limit`` is given, else ``None``.

        :param page: 1-based page number (defaults to 1).
        :param limit: Page size; clamped to ``[1, max_limit]``.
        """
        if limit is None:
            return None
        return Window(page=max(1, int(page or 1)), limit=min(max(1, int(limit)), max_limit))

    @staticmethod
    def now_utc() -> datetime:
        return datetime.now(UTC)

    # -------------------------- Error handling ------------------------------

    @staticmethod
    def translate_exceptions(exc: ServiceError) -> api_errors.APIError:
        """
        Map service-level errors to API-level (HTTP) errors.

        :param exc: Exception raised within a service.
        :returns: Translated :class:`~videotube.core.errors.APIError`.
        """
        message = str(exc)

        if isinstance(exc, NotFoundError):
            return api_errors.NotFound(message)

        if isinstance(exc, ConflictError):
            return api_errors.Conflict(message)

        # Wrong password is reported as a bad request, not a 401
        if isinstance(exc, InvalidCredentialsError):
            return api_errors.BadRequest(message)

        if isinstance(exc, UnauthorizedError):
            return api_errors.Unauthorized(message)

        if isinstance(exc, InternalError):
            return api_errors.InternalServerError(message)

        # Any other ServiceError subclass → 400 Bad Request
        return api_errors.BadRequest(message)
