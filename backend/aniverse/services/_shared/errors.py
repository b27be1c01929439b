"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and should never import or depend
on Flask or HTTP. They serve as stable contracts between repositories, domain
models, and application services.

The translation to HTTP responses (RFC 7807) is handled by
``aniverse/core/errors.py`` via :func:`aniverse.services._shared.base.translate_exceptions`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    PostgreSQL includes the constraint name in the message; SQLite reports the
    offending columns instead, so callers may pass either.

    :param exc: The exception raised by SQLAlchemy during flush/commit.
    :param constraint_name: Constraint name or column fragment to look for.
    :returns: True if the IntegrityError matches the given constraint.
    """
    message = str(exc.orig).lower() if exc.orig else ""
    return constraint_name.lower() in message


# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - They can be safely raised from repositories, adapters or domain logic.
    - The error layer translates them to APIError at the request boundary.
    """


# --------------------------------------------------------------------------- #
# Specific domain-level errors
# --------------------------------------------------------------------------- #


@dataclass(slots=True)
class ValidationError(ServiceError):
    """
    Raised for malformed input that passed transport-level parsing.

    :param field: Offending input field.
    :param message: Human-readable explanation.
    """

    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"

    def as_details(self) -> dict[str, Any]:
        return {self.field: [self.message]}


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    Raised when an entity is not found.

    :param entity: Entity name (e.g., "User").
    :param key: Identifier or search key.
    """

    entity: str
    key: str | int

    def __str__(self) -> str:
        return f"{self.entity} not found: {self.key}"


@dataclass(slots=True)
class ConflictError(ServiceError):
    """
    Raised when a unique constraint or business rule conflict occurs.

    :param entity: Entity name (e.g., "User").
    :param detail: Short human-readable explanation.
    """

    entity: str
    detail: str

    def __str__(self) -> str:
        return f"Conflict on {self.entity}: {self.detail}"


class InvalidCredentialsError(ServiceError):
    """Raised on a failed login. Deliberately carries no hint of the cause."""

    def __init__(self) -> None:
        super().__init__("Invalid email or password")


@dataclass(slots=True)
class UnauthenticatedError(ServiceError):
    """
    Raised for a missing, invalid, expired or revoked token.

    ``reason`` is for server logs only and is never sent to the client.
    """

    reason: str = "unauthenticated"

    def __str__(self) -> str:
        return "Authentication required"


@dataclass(slots=True)
class ExternalUnavailableError(ServiceError):
    """
    Raised when an upstream provider times out, is unreachable or answers 5xx.

    :param provider: Provider name (e.g., "jikan").
    :param detail: Operator-facing cause.
    """

    provider: str
    detail: str = ""

    def __str__(self) -> str:
        return f"{self.provider} is unavailable, try again later"


class InternalError(ServiceError):
    """Raised when a workflow could not complete and was rolled back."""
