"""Authentication use cases."""

from .get_current_user import GetCurrentUserUseCase
from .initiate_login import InitiateLoginUseCase
from .login import LoginError, LoginFailureReason, LoginUseCase
from .logout import LogoutUseCase

__all__ = [
    "GetCurrentUserUseCase",
    "InitiateLoginUseCase",
    "LoginError",
    "LoginFailureReason",
    "LoginUseCase",
    "LogoutUseCase",
]
