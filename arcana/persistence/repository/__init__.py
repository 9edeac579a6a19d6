"""PostgreSQL repository implementations."""

from arcana.persistence.repository.auth_session import PostgresAuthSessionRepository
from arcana.persistence.repository.user import PostgresUserRepository

__all__ = [
    "PostgresAuthSessionRepository",
    "PostgresUserRepository",
]
