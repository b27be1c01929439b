from __future__ import annotations

import logging
import re

from sqlalchemy.exc import IntegrityError

from aniverse.repositories.user import UserRepository
from aniverse.services._shared.base import BaseService, ServiceContext
from aniverse.services._shared.errors import (
    ConflictError,
    InternalError,
    InvalidCredentialsError,
    UnauthenticatedError,
    ValidationError,
    violates,
)
from aniverse.services._shared.ports.refresh_token_store import RotationResult
from aniverse.services.auth.dto import AuthResult, LoginIn, LogoutIn, RefreshIn, RegisterIn
from aniverse.services.profiles.dto import UserPublicOut, to_user_public
from aniverse.services.tokens import Identity, TokenService

log = logging.getLogger(__name__)

PASSWORD_MIN_LENGTH = 3
PASSWORD_MAX_LENGTH = 32

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def normalize_email(raw: object) -> str:
    """
    Trim and lowercase an email, validating its shape.

    :raises ValidationError: When the value is not a plausible address.
    """
    if not isinstance(raw, str) or not raw.strip():
        raise ValidationError("email", "Email is required.")
    email = raw.strip().lower()
    if len(email) > 254 or not _EMAIL_RE.match(email):
        raise ValidationError("email", "Not a valid email address.")
    return email


def validate_password(raw: object) -> str:
    if not isinstance(raw, str) or not (PASSWORD_MIN_LENGTH <= len(raw) <= PASSWORD_MAX_LENGTH):
        raise ValidationError(
            "password",
            f"Password must be between {PASSWORD_MIN_LENGTH} and {PASSWORD_MAX_LENGTH} characters.",
        )
    return raw


class SessionService(BaseService):
    """
    Session workflow: register, login, logout and refresh.

    Each successful register/login/refresh leaves exactly one live refresh
    token for the user (the one just issued). Logout removes it. Every
    authentication failure on refresh is reported as
    :class:`UnauthenticatedError`; the precise reason is logged only.
    """

    def __init__(self, tokens: TokenService, *, ctx: ServiceContext | None = None) -> None:
        """
        :param tokens: Token service (signing config and refresh store injected).
        :param ctx: Optional request-scoped context.
        """
        super().__init__(ctx=ctx)
        self.tokens = tokens

    # ------------------------------------------------------------------ #
    # Register
    # ------------------------------------------------------------------ #

    def register(self, dto: RegisterIn) -> AuthResult:
        """
        Create an account and open its first session.

        :raises ValidationError: Malformed email or password out of bounds.
        :raises ConflictError: Email already registered.
        :raises InternalError: The refresh record could not be stored; the
            new account has been removed again.
        """
        email = normalize_email(dto.email)
        password = validate_password(dto.password)

        try:
            with self.rw_uow() as uow:
                repo: UserRepository = uow.users
                if repo.exists_by_email(email):
                    raise ConflictError("User", "email already in use")
                user = repo.model(email=email, password=password)
                repo.add(user)
                public = to_user_public(user)
        except IntegrityError as exc:
            # Lost the race against a concurrent registration of the same email
            if violates(exc, "uq_users_email") or violates(exc, "users.email"):
                raise ConflictError("User", "email already in use") from exc
            raise

        pair = self.tokens.issue_token_pair(Identity(user_id=public.id, email=public.email))
        try:
            self.tokens.persist_refresh_token(public.id, pair.refresh_token)
        except Exception as exc:
            log.error(
                "registration rolled back: refresh record not stored",
                extra={"event": "auth.register_rollback", "user_id": public.id},
                exc_info=True,
            )
            self._discard_user(public.id)
            raise InternalError("registration could not be completed") from exc

        log.info("user registered", extra={"event": "auth.register", "user_id": public.id})
        return AuthResult(access_token=pair.access_token, refresh_token=pair.refresh_token, user=public)

    def _discard_user(self, user_id: int) -> None:
        with self.rw_uow() as uow:
            user = uow.users.get(user_id)
            if user is not None:
                uow.users.delete(user)

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> AuthResult:
        """
        Authenticate credentials and open a new session.

        Any refresh token issued before this call stops working.

        :raises InvalidCredentialsError: Unknown email or wrong password,
            indistinguishably.
        """
        email = dto.email.strip().lower() if isinstance(dto.email, str) else ""
        password = dto.password if isinstance(dto.password, str) else ""

        with self.ro_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.authenticate(email, password) if email and password else None
            if user is None:
                log.warning("login failed", extra={"event": "auth.login_failed"})
                raise InvalidCredentialsError()
            public = to_user_public(user)

        result = self._open_session(public)
        log.info("user logged in", extra={"event": "auth.login", "user_id": public.id})
        return result

    # ------------------------------------------------------------------ #
    # Logout
    # ------------------------------------------------------------------ #

    def logout(self, dto: LogoutIn) -> None:
        """Drop the refresh record of ``dto.refresh_token``. Always succeeds."""
        if not dto.refresh_token:
            return
        removed = self.tokens.delete_refresh_token(dto.refresh_token)
        log.info("logout", extra={"event": "auth.logout" if removed else "auth.logout_noop"})

    # ------------------------------------------------------------------ #
    # Refresh
    # ------------------------------------------------------------------ #

    def refresh(self, dto: RefreshIn) -> AuthResult:
        """
        Exchange the live refresh token for a new pair, rotating it.

        :raises UnauthenticatedError: Token absent, invalid, expired, not the
            live token of its user (logged out, superseded, already rotated),
            or its user no longer exists.
        """
        token = dto.refresh_token
        if not token:
            raise UnauthenticatedError("missing refresh token")

        identity = self.tokens.verify_refresh_token(token)
        if identity is None:
            raise UnauthenticatedError("refresh token failed verification")

        with self.ro_uow() as uow:
            user = uow.users.get(identity.user_id)
            public = to_user_public(user) if user is not None else None
        if public is None:
            raise UnauthenticatedError(f"user {identity.user_id} no longer exists")

        pair = self.tokens.issue_token_pair(Identity(user_id=public.id, email=public.email))
        outcome = self.tokens.rotate_refresh_token(public.id, token, pair.refresh_token)
        if outcome is not RotationResult.OK:
            log.warning(
                "refresh rejected",
                extra={"event": f"auth.refresh_{outcome.name.lower()}", "user_id": public.id},
            )
            raise UnauthenticatedError(f"refresh token {outcome.name.lower()}")

        return AuthResult(access_token=pair.access_token, refresh_token=pair.refresh_token, user=public)

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    def current_user(self, user_id: int) -> UserPublicOut:
        """Return the public view of an authenticated user (for ``/auth`` checks)."""
        with self.ro_uow() as uow:
            self.ensure_user_exists(uow, user_id)
            return to_user_public(uow.users.get(user_id))

    def _open_session(self, public: UserPublicOut) -> AuthResult:
        pair = self.tokens.issue_token_pair(Identity(user_id=public.id, email=public.email))
        self.tokens.persist_refresh_token(public.id, pair.refresh_token)
        return AuthResult(access_token=pair.access_token, refresh_token=pair.refresh_token, user=public)
