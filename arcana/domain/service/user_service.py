"""User domain service."""

from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

import logfire

from arcana.domain.error import NotFoundError, OnboardingRegressionError
from arcana.domain.model import NotificationPreferences, Preferences, User
from arcana.domain.repository import UserRepository
from arcana.domain.value import OAuthProfile, OnboardingStep, UserId

from .base import Service


class UserService(Service):
    """Domain service for user operations."""

    def __init__(self, user_repository: UserRepository) -> None:
        """Initialize user service.

        Args:
            user_repository: User repository
        """
        self.user_repository = user_repository

    async def get_by_id(self, user_id: UserId) -> User:
        """Get user by ID.

        Raises:
            NotFoundError: If user not found
        """
        with logfire.span("user_service.get_by_id", user_id=str(user_id)):
            user = await self.user_repository.find_by_id(user_id)
            if not user:
                logfire.warn("User not found", user_id=str(user_id))
                raise NotFoundError("User", str(user_id))
            return user

    async def find_by_google_id(self, google_id: str) -> User | None:
        return await self.user_repository.find_by_google_id(google_id)

    async def find_by_email(self, email: str) -> User | None:
        return await self.user_repository.find_by_email(email.strip().lower())

    async def create_from_profile(self, profile: OAuthProfile) -> User:
        """Create a user with default preferences, onboarding and stats.

        Args:
            profile: Provider profile; must carry an email

        Returns:
            The inserted user

        Raises:
            DuplicateUserError: If email or google_id is already taken
        """
        now = datetime.now(timezone.utc)
        user = User(
            id=UserId(uuid4()),
            google_id=profile.provider_user_id,
            email=profile.email,
            name=profile.display_name,
            google_image=profile.avatar_url,
            created_at=now,
            updated_at=now,
        )
        with logfire.span("user_service.create_from_profile", user_id=str(user.id)):
            created = await self.user_repository.create(user)
            logfire.info("User created", user_id=str(created.id))
            return created

    async def refresh_from_profile(self, user: User, profile: OAuthProfile) -> User:
        """Refresh name and avatar from the latest provider profile."""
        updated = user.model_copy(
            update={
                "name": profile.display_name,
                "google_image": profile.avatar_url,
                "updated_at": datetime.now(timezone.utc),
            }
        )
        with logfire.span("user_service.refresh_from_profile", user_id=str(user.id)):
            saved = await self.user_repository.update(updated)
            logfire.info("User refreshed from provider profile", user_id=str(user.id))
            return saved

    async def update_profile(
        self,
        user_id: UserId,
        name: str | None = None,
        profile_image: str | None = None,
        notifications: dict[str, Any] | None = None,
    ) -> User:
        """Update editable profile fields. None means "leave unchanged"."""
        user = await self.get_by_id(user_id)
        changes: dict[str, Any] = {"updated_at": datetime.now(timezone.utc)}
        if name is not None:
            changes["name"] = name
        if profile_image is not None:
            changes["profile_image"] = profile_image
        if notifications is not None:
            changes["preferences"] = self._merge_notifications(user, notifications)

        # Round-trip through validation so field rules still apply
        updated = User.model_validate({**user.model_dump(), **changes})
        return await self.user_repository.update(updated)

    async def update_preferences(
        self, user_id: UserId, notifications: dict[str, Any]
    ) -> User:
        """Merge notification preferences into the stored ones."""
        return await self.update_profile(user_id, notifications=notifications)

    async def set_profile_image(self, user_id: UserId, profile_image: str) -> User:
        return await self.update_profile(user_id, profile_image=profile_image)

    async def advance_onboarding(self, user_id: UserId, step: OnboardingStep) -> User:
        """Move onboarding forward.

        Raises:
            OnboardingRegressionError: If `step` is earlier than the current step
        """
        user = await self.get_by_id(user_id)
        current = user.onboarding.step
        if not current.can_advance_to(step):
            raise OnboardingRegressionError(current.value, step.value)

        now = datetime.now(timezone.utc)
        completed = step == OnboardingStep.COMPLETED
        onboarding = user.onboarding.model_copy(
            update={
                "step": step,
                "completed": completed,
                "completed_at": (user.onboarding.completed_at or now)
                if completed
                else None,
            }
        )
        updated = user.model_copy(update={"onboarding": onboarding, "updated_at": now})
        logfire.info(
            "Onboarding advanced",
            user_id=str(user_id),
            from_step=current.value,
            to_step=step.value,
        )
        return await self.user_repository.update(updated)

    async def delete(self, user_id: UserId) -> User:
        """Delete a user and return the removed record.

        Raises:
            NotFoundError: If user not found
        """
        user = await self.get_by_id(user_id)
        with logfire.span("user_service.delete", user_id=str(user_id)):
            deleted = await self.user_repository.delete(user_id)
            if not deleted:
                raise NotFoundError("User", str(user_id))
            logfire.info("User deleted", user_id=str(user_id))
            return user

    @staticmethod
    def _merge_notifications(user: User, changes: dict[str, Any]) -> Preferences:
        merged = {**user.preferences.notifications.model_dump(), **changes}
        return Preferences(notifications=NotificationPreferences(**merged))
