"""Unit tests for the in-memory repositories used by the test container."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from arcana.domain.error import DuplicateUserError, NotFoundError
from arcana.domain.model import AuthSession, User
from arcana.domain.value import AuthSessionId, UserId
from arcana.persistence.repository.inmemory import (
    InMemoryAuthSessionRepository,
    InMemoryUserRepository,
)


def make_user(email: str = "ada@example.com", google_id: str | None = "g-1") -> User:
    return User(id=UserId(uuid4()), email=email, name="Ada", google_id=google_id)


class TestInMemoryUserRepository:
    """Tests for uniqueness and CRUD behavior."""

    @pytest.mark.asyncio
    async def test_create_and_find(self):
        repo = InMemoryUserRepository()
        user = await repo.create(make_user())

        assert await repo.find_by_id(user.id) == user
        assert await repo.find_by_email("ADA@example.com") == user
        assert await repo.find_by_google_id("g-1") == user
        assert await repo.count() == 1

    @pytest.mark.asyncio
    async def test_duplicate_email_is_rejected(self):
        repo = InMemoryUserRepository()
        await repo.create(make_user())

        with pytest.raises(DuplicateUserError) as exc_info:
            await repo.create(make_user(google_id="g-2"))
        assert exc_info.value.field == "email"
        assert await repo.count() == 1

    @pytest.mark.asyncio
    async def test_users_without_google_id_do_not_collide(self):
        repo = InMemoryUserRepository()

        await repo.create(make_user(email="a@example.com", google_id=None))
        await repo.create(make_user(email="b@example.com", google_id=None))

        assert await repo.count() == 2

    @pytest.mark.asyncio
    async def test_update_missing_user_raises(self):
        repo = InMemoryUserRepository()

        with pytest.raises(NotFoundError):
            await repo.update(make_user())

    @pytest.mark.asyncio
    async def test_delete_reports_whether_removed(self):
        repo = InMemoryUserRepository()
        user = await repo.create(make_user())

        assert await repo.delete(user.id) is True
        assert await repo.delete(user.id) is False


class TestInMemoryAuthSessionRepository:
    """Tests for session expiry handling."""

    @pytest.mark.asyncio
    async def test_expired_session_is_invisible(self):
        repo = InMemoryAuthSessionRepository()
        now = datetime.now(timezone.utc)
        session = AuthSession(
            id=AuthSessionId("s-1"), data={}, expires_at=now + timedelta(minutes=5)
        )
        await repo.save(session)

        assert await repo.get(session.id, now) == session
        assert await repo.get(session.id, now + timedelta(minutes=5)) is None

    @pytest.mark.asyncio
    async def test_touch_ignores_missing_session(self):
        repo = InMemoryAuthSessionRepository()
        now = datetime.now(timezone.utc)

        await repo.touch(AuthSessionId("missing"), now + timedelta(days=1), now)

        assert await repo.get(AuthSessionId("missing"), now) is None
