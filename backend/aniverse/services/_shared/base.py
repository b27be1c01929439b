from __future__ import annotations

import logging
from dataclasses import dataclass

from aniverse.core import errors as api_errors
from aniverse.services._shared.errors import (
    ConflictError,
    ExternalUnavailableError,
    InvalidCredentialsError,
    NotFoundError,
    ServiceError,
    UnauthenticatedError,
    ValidationError,
)
from aniverse.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)

log = logging.getLogger(__name__)


@dataclass(slots=True)
class ServiceContext:
    """
    Carry cross-cutting request-scoped data (auth, request ids, etc.).

    :param actor_id: Authenticated user identifier.
    :param request_id: Correlation id for logging/tracing.
    """

    actor_id: int | None = None
    request_id: str | None = None


def translate_exceptions(exc: Exception) -> Exception:
    """
    Map domain/service-level errors to API-level (HTTP) errors.

    :param exc: Exception raised within the service.
    :type exc: Exception
    :returns: Translated exception ready to be re-raised or rendered.
    :rtype: Exception
    """
    if isinstance(exc, ValidationError):
        # → 400 with field-level details
        return api_errors.ValidationFailed(str(exc), errors=exc.as_details())

    if isinstance(exc, ConflictError):
        # → 400, user-facing message only
        return api_errors.Conflict(exc.detail)

    if isinstance(exc, InvalidCredentialsError):
        return api_errors.InvalidCredentials()

    if isinstance(exc, UnauthenticatedError):
        # Uniform 401; the reason only goes to the log
        log.info("unauthenticated: %s", exc.reason)
        return api_errors.Unauthenticated()

    if isinstance(exc, NotFoundError):
        return api_errors.NotFound(str(exc))

    if isinstance(exc, ExternalUnavailableError):
        log.warning("upstream unavailable: provider=%s detail=%s", exc.provider, exc.detail)
        return api_errors.ExternalUnavailable(str(exc))

    # InternalError and unknown ServiceErrors stay untranslated → generic 500
    return exc


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide helpers to run read-only and read-write units of work.
    * Centralize error translation.
    * Keep services thin, orchestration-only, no web/ORM leakage.

    Notes
    -----
    Services must never touch the global session; always use a Unit of Work.
    """

    def __init__(self, *, ctx: ServiceContext | None = None) -> None:
        """
        Initialize the base service.

        :param ctx: Optional request-scoped context (auth, tracing).
        :type ctx: ServiceContext | None
        """
        self.ctx = ctx or ServiceContext()

    # -------------------------- UoW helpers ---------------------------------

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        """Create a read-write Unit of Work (commit on success, rollback on error)."""
        return SQLAlchemyUnitOfWork()

    def ro_uow(self) -> SQLAlchemyReadOnlyUnitOfWork:
        """Create a read-only Unit of Work (always rolls back)."""
        return SQLAlchemyReadOnlyUnitOfWork()

    # -------------------------- Error handling ------------------------------

    def translate_exceptions(self, exc: Exception) -> Exception:
        """Instance shortcut for :func:`translate_exceptions`."""
        return translate_exceptions(exc)

    # ----------------------------- Guards -----------------------------------

    def ensure_user_exists(
        self, uow: SQLAlchemyUnitOfWork | SQLAlchemyReadOnlyUnitOfWork, user_id: int
    ) -> None:
        """
        Raise :class:`NotFoundError` unless ``user_id`` resolves to a user.

        :raises NotFoundError: When the user is unknown.
        """
        if not uow.users.exists_by_id(user_id):
            raise NotFoundError("User", user_id)


__all__ = ["BaseService", "ServiceContext", "ServiceError", "translate_exceptions"]
