from .dto import Identity, TokenConfig, TokenPair
from .service import ACCESS_TOKEN_TYPE, REFRESH_TOKEN_TYPE, TokenService

__all__ = [
    "ACCESS_TOKEN_TYPE",
    "REFRESH_TOKEN_TYPE",
    "Identity",
    "TokenConfig",
    "TokenPair",
    "TokenService",
]
