from .dto import AuthResult, LoginIn, LogoutIn, RefreshIn, RegisterIn
from .service import SessionService, normalize_email, validate_password

__all__ = [
    "AuthResult",
    "LoginIn",
    "LogoutIn",
    "RefreshIn",
    "RegisterIn",
    "SessionService",
    "normalize_email",
    "validate_password",
]
