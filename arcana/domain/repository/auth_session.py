"""Session store interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from arcana.domain.model.auth_session import AuthSession
from arcana.domain.value import AuthSessionId


class AuthSessionRepository(ABC):
    """Persistent session store with TTL-based expiry.

    The store is the single source of truth for session existence: `get`
    never returns a record whose `expires_at` has passed, whatever the
    caller believes.
    """

    @abstractmethod
    async def get(
        self, session_id: AuthSessionId, now: datetime
    ) -> Optional[AuthSession]:
        """Return the session if it exists and has not expired."""
        pass

    @abstractmethod
    async def save(self, session: AuthSession) -> AuthSession:
        """Create or replace a session."""
        pass

    @abstractmethod
    async def touch(
        self, session_id: AuthSessionId, expires_at: datetime, now: datetime
    ) -> None:
        """Extend a live session's expiry."""
        pass

    @abstractmethod
    async def delete(self, session_id: AuthSessionId) -> None:
        """Remove a session (no-op if absent)."""
        pass

    @abstractmethod
    async def purge_expired(self, now: datetime) -> int:
        """Remove all expired sessions.

        Returns:
            Number of sessions removed
        """
        pass
