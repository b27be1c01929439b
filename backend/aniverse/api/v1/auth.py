"""Session endpoints: register, login, logout and refresh."""

from __future__ import annotations

from flask import Blueprint, request

from aniverse.api.deps import (
    clear_refresh_cookie,
    json_response,
    read_refresh_cookie,
    service_context,
    set_refresh_cookie,
    timing,
)
from aniverse.core.security import get_token_service
from aniverse.schemas import AuthResponseSchema, LoginSchema, RegisterSchema
from aniverse.services.auth import (
    AuthResult,
    LoginIn,
    LogoutIn,
    RefreshIn,
    RegisterIn,
    SessionService,
)

bp = Blueprint("auth", __name__)

register_schema = RegisterSchema()
login_schema = LoginSchema()
auth_response_schema = AuthResponseSchema()


def _sessions() -> SessionService:
    return SessionService(get_token_service(), ctx=service_context())


def _auth_response(result: AuthResult, *, status: int = 200):
    body = auth_response_schema.dump({"access_token": result.access_token, "user": result.user})
    response = json_response(body, status=status)
    return set_refresh_cookie(response, result.refresh_token)


@bp.post("/register")
@timing
def register():
    """Create an account; returns the access token and sets the refresh cookie."""

    data = register_schema.load(request.get_json(silent=True) or {})
    result = _sessions().register(RegisterIn(email=data["email"], password=data["password"]))
    return _auth_response(result, status=201)


@bp.post("/login")
@timing
def login():
    """Authenticate credentials and open a new session."""

    data = login_schema.load(request.get_json(silent=True) or {})
    result = _sessions().login(LoginIn(email=data["email"], password=data["password"]))
    return _auth_response(result)


@bp.post("/logout")
@timing
def logout():
    """Revoke the session carried by the refresh cookie. Always 200."""

    _sessions().logout(LogoutIn(refresh_token=read_refresh_cookie()))
    return clear_refresh_cookie(json_response({"ok": True}))


@bp.get("/refresh")
@timing
def refresh():
    """Rotate the refresh cookie and return a new access token."""

    result = _sessions().refresh(RefreshIn(refresh_token=read_refresh_cookie()))
    return _auth_response(result)
