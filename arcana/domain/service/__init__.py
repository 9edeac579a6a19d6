"""Domain services."""

from .auth_service import AuthService, OAuthClient
from .base import Service
from .jwt_service import JWTService
from .session_service import SessionService
from .user_service import UserService

__all__ = [
    "AuthService",
    "JWTService",
    "OAuthClient",
    "Service",
    "SessionService",
    "UserService",
]
