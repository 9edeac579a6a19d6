"""PostgreSQL implementation of the session store."""

from datetime import datetime
from typing import Optional

from sqlalchemy import delete, select, update
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from arcana.domain.model import AuthSession
from arcana.domain.repository import AuthSessionRepository
from arcana.domain.value import AuthSessionId
from arcana.persistence.mappers import auth_session_to_dict, row_to_auth_session
from arcana.persistence.tables import auth_sessions_table


class PostgresAuthSessionRepository(AuthSessionRepository):
    """PostgreSQL implementation of AuthSessionRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(
        self, session_id: AuthSessionId, now: datetime
    ) -> Optional[AuthSession]:
        """Return the session if it exists and has not expired."""
        stmt = select(auth_sessions_table).where(
            auth_sessions_table.c.id == session_id,
            auth_sessions_table.c.expires_at > now,
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_auth_session(dict(row)) if row else None

    async def save(self, session: AuthSession) -> AuthSession:
        """Create or replace a session (upsert on id)."""
        values = auth_session_to_dict(session)
        stmt = insert(auth_sessions_table).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[auth_sessions_table.c.id],
            set_={
                "data": stmt.excluded.data,
                "expires_at": stmt.excluded.expires_at,
                "updated_at": stmt.excluded.updated_at,
            },
        )
        await self.session.execute(stmt)
        return session

    async def touch(
        self, session_id: AuthSessionId, expires_at: datetime, now: datetime
    ) -> None:
        """Extend a live session's expiry."""
        stmt = (
            update(auth_sessions_table)
            .where(
                auth_sessions_table.c.id == session_id,
                auth_sessions_table.c.expires_at > now,
            )
            .values(expires_at=expires_at, updated_at=now)
        )
        await self.session.execute(stmt)

    async def delete(self, session_id: AuthSessionId) -> None:
        """Remove a session."""
        await self.session.execute(
            delete(auth_sessions_table).where(auth_sessions_table.c.id == session_id)
        )

    async def purge_expired(self, now: datetime) -> int:
        """Remove all expired sessions."""
        result = await self.session.execute(
            delete(auth_sessions_table).where(auth_sessions_table.c.expires_at <= now)
        )
        return result.rowcount
