"""Server-side session record.

Sessions only bridge the OAuth redirect: the initiating request stores the
client's redirect URI and the OAuth `state`, the callback reads and clears
them. API requests never authenticate through a session.
"""

from datetime import datetime, timezone
from typing import Any

from pydantic import Field

from arcana.domain.model.common import DomainModel
from arcana.domain.value import AuthSessionId


class AuthSession(DomainModel):
    """Session record keyed by the cookie-presented session ID."""

    id: AuthSessionId
    data: dict[str, Any] = Field(default_factory=dict)
    expires_at: datetime
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def is_expired(self, now: datetime | None = None) -> bool:
        return self.expires_at <= (now or datetime.now(timezone.utc))
