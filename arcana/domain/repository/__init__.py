"""Repository interfaces.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the persistence layer.
"""

from arcana.domain.repository.auth_session import AuthSessionRepository
from arcana.domain.repository.user import UserRepository

__all__ = [
    "AuthSessionRepository",
    "UserRepository",
]
