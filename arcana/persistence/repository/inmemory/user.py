"""In-memory user repository for testing."""

from typing import Optional

from arcana.domain.error import DuplicateUserError, NotFoundError
from arcana.domain.model.user import User
from arcana.domain.repository.user import UserRepository
from arcana.domain.value import UserId


class InMemoryUserRepository(UserRepository):
    """In-memory implementation of UserRepository for testing.

    Enforces the same email/google_id uniqueness as the database.
    """

    def __init__(self) -> None:
        self._users: dict[UserId, User] = {}

    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        """Find a user by ID."""
        return self._users.get(user_id)

    async def find_by_email(self, email: str) -> Optional[User]:
        """Find a user by their email."""
        email = email.lower()
        for user in self._users.values():
            if user.email == email:
                return user
        return None

    async def find_by_google_id(self, google_id: str) -> Optional[User]:
        """Find a user by their Google account ID."""
        for user in self._users.values():
            if user.google_id == google_id:
                return user
        return None

    def _check_unique(self, user: User) -> None:
        for other in self._users.values():
            if other.id == user.id:
                continue
            if user.google_id is not None and other.google_id == user.google_id:
                raise DuplicateUserError("google_id")
            if other.email == user.email:
                raise DuplicateUserError("email")

    async def create(self, user: User) -> User:
        """Insert a new user."""
        if user.id in self._users:
            raise DuplicateUserError("id")
        self._check_unique(user)
        self._users[user.id] = user
        return user

    async def update(self, user: User) -> User:
        """Overwrite an existing user."""
        if user.id not in self._users:
            raise NotFoundError("User", str(user.id))
        self._check_unique(user)
        self._users[user.id] = user
        return user

    async def delete(self, user_id: UserId) -> bool:
        """Delete a user."""
        return self._users.pop(user_id, None) is not None

    async def count(self) -> int:
        """Number of stored users."""
        return len(self._users)
