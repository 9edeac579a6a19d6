"""In-memory repository implementations for testing."""

from arcana.persistence.repository.inmemory.auth_session import (
    InMemoryAuthSessionRepository,
)
from arcana.persistence.repository.inmemory.user import InMemoryUserRepository

__all__ = [
    "InMemoryAuthSessionRepository",
    "InMemoryUserRepository",
]
