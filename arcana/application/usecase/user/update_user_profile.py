"""Update user profile use case."""

from typing import Any

import logfire
from pydantic import BaseModel

from arcana.application.usecase.base import BaseUseCase
from arcana.application.view import UserProfileView
from arcana.domain.service import UserService
from arcana.domain.value import UserId


class UpdateUserProfileRequest(BaseModel):
    """Update user profile request. None fields are left unchanged."""

    user_id: UserId
    name: str | None = None
    profile_image: str | None = None
    notifications: dict[str, Any] | None = None


class UpdateUserProfileUseCase(BaseUseCase):
    """Use case for updating a user's editable profile fields."""

    def __init__(self, user_service: UserService) -> None:
        """Initialize update user profile use case.

        Args:
            user_service: User domain service
        """
        self.user_service = user_service

    async def execute(self, request: UpdateUserProfileRequest) -> UserProfileView:
        """Execute update user profile flow.

        Raises:
            NotFoundError: If user not found
            pydantic.ValidationError: If a new value breaks a field rule
        """
        with logfire.span("update_user_profile", user_id=str(request.user_id)):
            user = await self.user_service.update_profile(
                request.user_id,
                name=request.name,
                profile_image=request.profile_image,
                notifications=request.notifications,
            )
            logfire.info(
                "User profile updated",
                user_id=str(user.id),
                fields=sorted(
                    request.model_dump(exclude_none=True, exclude={"user_id"})
                ),
            )
            return UserProfileView.from_user(user)
