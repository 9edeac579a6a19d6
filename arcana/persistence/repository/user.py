"""PostgreSQL implementation of User repository."""

from typing import Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from arcana.domain.error import DuplicateUserError, NotFoundError
from arcana.domain.model import User
from arcana.domain.repository import UserRepository
from arcana.domain.value import UserId
from arcana.persistence.mappers import row_to_user, user_to_dict
from arcana.persistence.tables import users_table


def _violated_field(error: IntegrityError) -> str:
    """Name the unique user field an IntegrityError refers to."""
    if "uq_users_google_id" in str(error.orig):
        return "google_id"
    return "email"


class PostgresUserRepository(UserRepository):
    """PostgreSQL implementation of UserRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        """Find a user by ID.

        Args:
            user_id: User ID to look up

        Returns:
            User if found, None otherwise
        """
        stmt = select(users_table).where(users_table.c.id == user_id)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_user(dict(row)) if row else None

    async def find_by_email(self, email: str) -> Optional[User]:
        """Find a user by their email."""
        stmt = select(users_table).where(users_table.c.email == email.lower())
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_user(dict(row)) if row else None

    async def find_by_google_id(self, google_id: str) -> Optional[User]:
        """Find a user by their Google account ID."""
        stmt = select(users_table).where(users_table.c.google_id == google_id)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_user(dict(row)) if row else None

    async def create(self, user: User) -> User:
        """Insert a new user.

        The insert runs in a savepoint so a unique violation leaves the
        surrounding transaction usable for the caller's retry path.
        """
        try:
            async with self.session.begin_nested():
                await self.session.execute(
                    users_table.insert().values(**user_to_dict(user))
                )
        except IntegrityError as e:
            raise DuplicateUserError(_violated_field(e)) from e
        return user

    async def update(self, user: User) -> User:
        """Overwrite an existing user."""
        values = user_to_dict(user)
        values.pop("id")
        stmt = update(users_table).where(users_table.c.id == user.id).values(**values)
        try:
            async with self.session.begin_nested():
                result = await self.session.execute(stmt)
        except IntegrityError as e:
            raise DuplicateUserError(_violated_field(e)) from e
        if result.rowcount == 0:
            raise NotFoundError("User", str(user.id))
        return user

    async def delete(self, user_id: UserId) -> bool:
        """Delete a user."""
        stmt = delete(users_table).where(users_table.c.id == user_id)
        result = await self.session.execute(stmt)
        return result.rowcount > 0

    async def count(self) -> int:
        """Number of stored users."""
        result = await self.session.execute(select(func.count()).select_from(users_table))
        return result.scalar_one()
