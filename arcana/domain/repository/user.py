"""User repository interface."""

from abc import ABC, abstractmethod
from typing import Optional

from arcana.domain.model.user import User
from arcana.domain.value import UserId


class UserRepository(ABC):
    """Repository for User aggregate.

    Uniqueness of `email` and `google_id` is the store's job: `create`
    must fail atomically with DuplicateUserError rather than rely on the
    caller's check-then-insert.
    """

    @abstractmethod
    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        """Find a user by ID.

        Args:
            user_id: The user's unique identifier

        Returns:
            The user if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[User]:
        """Find a user by their (lowercased) email."""
        pass

    @abstractmethod
    async def find_by_google_id(self, google_id: str) -> Optional[User]:
        """Find a user by their Google account ID."""
        pass

    @abstractmethod
    async def create(self, user: User) -> User:
        """Insert a new user.

        Args:
            user: The user to insert

        Returns:
            The inserted user

        Raises:
            DuplicateUserError: If email or google_id is already taken
        """
        pass

    @abstractmethod
    async def update(self, user: User) -> User:
        """Overwrite an existing user.

        Args:
            user: The user to store

        Returns:
            The stored user

        Raises:
            NotFoundError: If the user does not exist
            DuplicateUserError: If the new email belongs to someone else
        """
        pass

    @abstractmethod
    async def delete(self, user_id: UserId) -> bool:
        """Delete a user.

        Returns:
            True if a record was removed
        """
        pass

    @abstractmethod
    async def count(self) -> int:
        """Number of stored users."""
        pass
