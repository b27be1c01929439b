"""Unit tests for SessionService (register, login, logout, refresh)."""

from __future__ import annotations

import pytest

from aniverse.models import User
from aniverse.services._shared.errors import (
    ConflictError,
    InternalError,
    InvalidCredentialsError,
    UnauthenticatedError,
    ValidationError,
)
from aniverse.services._shared.ports import InMemoryRefreshTokenStore
from aniverse.services.auth import LoginIn, LogoutIn, RefreshIn, RegisterIn, SessionService
from aniverse.services.tokens import TokenConfig, TokenService
from tests.factories.user import UserFactory


class ExplodingStore(InMemoryRefreshTokenStore):
    """Refresh store whose writes always fail."""

    def replace_for_user(self, user_id: int, token: str) -> None:
        raise ConnectionError("store down")


class SpyStore(InMemoryRefreshTokenStore):
    """Refresh store recording lookups and rotations."""

    def __init__(self) -> None:
        super().__init__()
        self.calls: list[str] = []

    def find(self, token):
        self.calls.append("find")
        return super().find(token)

    def get_for_user(self, user_id):
        self.calls.append("get_for_user")
        return super().get_for_user(user_id)

    def rotate(self, user_id, old_token, new_token):
        self.calls.append("rotate")
        return super().rotate(user_id, old_token, new_token)


def _tokens(store=None) -> TokenService:
    return TokenService(
        TokenConfig(access_secret="access-secret", refresh_secret="refresh-secret"),
        store if store is not None else InMemoryRefreshTokenStore(),
    )


# ------------------------------ Fixtures ---------------------------------- #
@pytest.fixture()
def service(app) -> SessionService:
    """Build a SessionService wired to an in-memory refresh store."""
    return SessionService(_tokens())


# ------------------------------ Register ---------------------------------- #
def test_register_then_login_yields_same_user(service):
    registered = service.register(RegisterIn(email="a@example.com", password="pass123"))
    logged_in = service.login(LoginIn(email="a@example.com", password="pass123"))

    assert registered.user.id == logged_in.user.id
    assert registered.user.email == "a@example.com"


def test_register_normalizes_email(service):
    result = service.register(RegisterIn(email="  Mixed@Example.COM ", password="pass123"))
    assert result.user.email == "mixed@example.com"


def test_register_opens_a_session(service):
    result = service.register(RegisterIn(email="a@example.com", password="pass123"))

    record = service.tokens.lookup_refresh_token(result.refresh_token)
    assert record is not None and record.user_id == result.user.id
    assert service.tokens.verify_access_token(result.access_token).user_id == result.user.id


def test_duplicate_register_conflicts(service):
    service.register(RegisterIn(email="a@example.com", password="pass123"))
    with pytest.raises(ConflictError):
        service.register(RegisterIn(email="A@example.com", password="other"))


@pytest.mark.parametrize(
    "email,password",
    [("not-an-email", "pass123"), ("a@example.com", "pw"), ("a@example.com", "x" * 33)],
)
def test_register_validates_input(service, email, password):
    with pytest.raises(ValidationError):
        service.register(RegisterIn(email=email, password=password))


def test_register_rolls_back_when_refresh_record_fails(app, session):
    service = SessionService(_tokens(ExplodingStore()))

    with pytest.raises(InternalError):
        service.register(RegisterIn(email="a@example.com", password="pass123"))

    session.expire_all()
    assert session.query(User).filter_by(email="a@example.com").count() == 0


# ------------------------------ Login -------------------------------------- #
def test_login_wrong_password_and_unknown_email_are_indistinguishable(service):
    UserFactory(email="a@example.com", password="pass123")

    with pytest.raises(InvalidCredentialsError) as wrong:
        service.login(LoginIn(email="a@example.com", password="nope"))
    with pytest.raises(InvalidCredentialsError) as unknown:
        service.login(LoginIn(email="b@example.com", password="pass123"))
    assert str(wrong.value) == str(unknown.value)


def test_second_login_invalidates_first_refresh_token(service):
    UserFactory(email="a@example.com", password="pass123")
    first = service.login(LoginIn(email="a@example.com", password="pass123"))
    service.login(LoginIn(email="a@example.com", password="pass123"))

    with pytest.raises(UnauthenticatedError):
        service.refresh(RefreshIn(refresh_token=first.refresh_token))


# ------------------------------ Refresh ------------------------------------ #
def test_refresh_rotates_and_blocks_reuse(service):
    """First refresh rotates; replaying the old token is rejected."""
    pair1 = service.register(RegisterIn(email="a@example.com", password="pass123"))

    pair2 = service.refresh(RefreshIn(refresh_token=pair1.refresh_token))
    assert pair2.refresh_token != pair1.refresh_token
    assert pair2.user.id == pair1.user.id

    with pytest.raises(UnauthenticatedError):
        service.refresh(RefreshIn(refresh_token=pair1.refresh_token))
    # the rotated token is still the live one
    assert service.refresh(RefreshIn(refresh_token=pair2.refresh_token)).user.id == pair1.user.id


def test_refresh_after_logout_fails_even_with_valid_signature(service):
    result = service.register(RegisterIn(email="a@example.com", password="pass123"))
    service.logout(LogoutIn(refresh_token=result.refresh_token))

    assert service.tokens.verify_refresh_token(result.refresh_token) is not None
    with pytest.raises(UnauthenticatedError):
        service.refresh(RefreshIn(refresh_token=result.refresh_token))


def test_refresh_rejects_access_token(service):
    result = service.register(RegisterIn(email="a@example.com", password="pass123"))
    with pytest.raises(UnauthenticatedError):
        service.refresh(RefreshIn(refresh_token=result.access_token))


def test_refresh_fails_if_user_deleted(service, session):
    result = service.register(RegisterIn(email="a@example.com", password="pass123"))
    session.delete(session.get(User, result.user.id))
    session.commit()

    with pytest.raises(UnauthenticatedError):
        service.refresh(RefreshIn(refresh_token=result.refresh_token))


@pytest.mark.parametrize("token", [None, ""])
def test_refresh_without_token_never_touches_store(app, token):
    store = SpyStore()
    service = SessionService(_tokens(store))

    with pytest.raises(UnauthenticatedError):
        service.refresh(RefreshIn(refresh_token=token))
    assert store.calls == []


# ------------------------------ Logout ------------------------------------- #
def test_logout_is_idempotent(service):
    result = service.register(RegisterIn(email="a@example.com", password="pass123"))
    service.logout(LogoutIn(refresh_token=result.refresh_token))
    service.logout(LogoutIn(refresh_token=result.refresh_token))
    service.logout(LogoutIn(refresh_token=None))

    assert not service.tokens.has_live_session(result.user.id)


def test_current_user(service):
    result = service.register(RegisterIn(email="a@example.com", password="pass123"))
    assert service.current_user(result.user.id).email == "a@example.com"
