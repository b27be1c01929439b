from __future__ import annotations

from dataclasses import dataclass

from aniverse.services.profiles.dto import UserPublicOut

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class RegisterIn:
    """
    Input DTO for registration.

    :param email: Raw email; normalized by the service.
    :type email: str
    :param password: Raw password (3 to 32 characters).
    :type password: str
    """

    email: str
    password: str


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login.

    :param email: User email.
    :type email: str
    :param password: Raw password (to be verified).
    :type password: str
    """

    email: str
    password: str


@dataclass(frozen=True, slots=True)
class RefreshIn:
    """
    Input DTO for token refresh.

    :param refresh_token: Value of the refresh cookie, possibly absent.
    :type refresh_token: str | None
    """

    refresh_token: str | None


@dataclass(frozen=True, slots=True)
class LogoutIn:
    """
    Input DTO for logout.

    :param refresh_token: Value of the refresh cookie, possibly absent.
    :type refresh_token: str | None
    """

    refresh_token: str | None


# ---------------------------- Output DTOs --------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthResult:
    """
    Result of register, login and refresh.

    The API returns ``access_token`` and ``user`` in the body and puts
    ``refresh_token`` into the HTTP-only cookie only.
    """

    access_token: str
    refresh_token: str
    user: UserPublicOut
