"""Session domain service.

Sessions carry state across the OAuth redirect only. The cookie holds the
session ID signed with SESSION_SECRET; the record itself lives in the
session store, which owns expiry.
"""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Any

import logfire
from itsdangerous import BadSignature, Signer

from arcana.config import AuthSettings
from arcana.domain.model import AuthSession
from arcana.domain.repository import AuthSessionRepository
from arcana.domain.value import AuthSessionId

from .base import Service


class SessionService(Service):
    """Create, read, update and delete sessions keyed by a signed cookie."""

    def __init__(
        self,
        session_repository: AuthSessionRepository,
        auth_settings: AuthSettings,
    ) -> None:
        """Initialize session service.

        Args:
            session_repository: Session store
            auth_settings: Authentication settings (secret, TTL)
        """
        self.session_repository = session_repository
        self.auth_settings = auth_settings
        self._signer = Signer(auth_settings.session_secret, salt="session-cookie")

    @property
    def ttl(self) -> timedelta:
        return timedelta(seconds=self.auth_settings.session_ttl_seconds)

    def sign(self, session_id: AuthSessionId) -> str:
        """Cookie value for a session ID."""
        return self._signer.sign(session_id).decode("utf-8")

    def unsign(self, cookie_value: str | None) -> AuthSessionId | None:
        """Session ID from a cookie value, or None if absent or tampered."""
        if not cookie_value:
            return None
        try:
            return AuthSessionId(self._signer.unsign(cookie_value).decode("utf-8"))
        except BadSignature:
            logfire.warn("Session cookie signature mismatch")
            return None

    async def create(
        self, data: dict[str, Any], now: datetime | None = None
    ) -> AuthSession:
        """Create and persist a new session."""
        now = now or datetime.now(timezone.utc)
        session = AuthSession(
            id=AuthSessionId(secrets.token_urlsafe(32)),
            data=data,
            expires_at=now + self.ttl,
            created_at=now,
            updated_at=now,
        )
        await self.session_repository.save(session)
        logfire.debug("Session created", expires_at=session.expires_at.isoformat())
        return session

    async def load(
        self, cookie_value: str | None, now: datetime | None = None
    ) -> AuthSession | None:
        """Load the live session named by a cookie.

        Touches the session lazily: expiry is only pushed forward once the
        record is older than the touch interval, to avoid a write on every
        read.
        """
        session_id = self.unsign(cookie_value)
        if session_id is None:
            return None

        now = now or datetime.now(timezone.utc)
        session = await self.session_repository.get(session_id, now)
        if session is None:
            return None

        touch_after = timedelta(seconds=self.auth_settings.session_touch_after_seconds)
        if now - session.updated_at >= touch_after:
            expires_at = now + self.ttl
            await self.session_repository.touch(session.id, expires_at, now)
            session = session.model_copy(
                update={"expires_at": expires_at, "updated_at": now}
            )
        return session

    async def destroy(self, session: AuthSession) -> None:
        await self.session_repository.delete(session.id)

    async def purge_expired(self, now: datetime | None = None) -> int:
        removed = await self.session_repository.purge_expired(
            now or datetime.now(timezone.utc)
        )
        logfire.info("Expired sessions purged", count=removed)
        return removed
