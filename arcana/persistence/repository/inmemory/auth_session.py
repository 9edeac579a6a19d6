"""In-memory session store for testing."""

from datetime import datetime
from typing import Optional

from arcana.domain.model import AuthSession
from arcana.domain.repository import AuthSessionRepository
from arcana.domain.value import AuthSessionId


class InMemoryAuthSessionRepository(AuthSessionRepository):
    """In-memory implementation of AuthSessionRepository for testing."""

    def __init__(self) -> None:
        self._sessions: dict[AuthSessionId, AuthSession] = {}

    async def get(
        self, session_id: AuthSessionId, now: datetime
    ) -> Optional[AuthSession]:
        """Return the session if it exists and has not expired."""
        session = self._sessions.get(session_id)
        if session is None:
            return None
        if session.is_expired(now):
            del self._sessions[session_id]
            return None
        return session

    async def save(self, session: AuthSession) -> AuthSession:
        """Create or replace a session."""
        self._sessions[session.id] = session
        return session

    async def touch(
        self, session_id: AuthSessionId, expires_at: datetime, now: datetime
    ) -> None:
        """Extend a live session's expiry."""
        session = await self.get(session_id, now)
        if session is not None:
            self._sessions[session_id] = session.model_copy(
                update={"expires_at": expires_at, "updated_at": now}
            )

    async def delete(self, session_id: AuthSessionId) -> None:
        """Remove a session."""
        self._sessions.pop(session_id, None)

    async def purge_expired(self, now: datetime) -> int:
        """Remove all expired sessions."""
        expired = [sid for sid, s in self._sessions.items() if s.is_expired(now)]
        for sid in expired:
            del self._sessions[sid]
        return len(expired)
