"""Get user profile use case."""

from pydantic import BaseModel

from arcana.application.usecase.base import BaseUseCase
from arcana.application.view import UserProfileView
from arcana.domain.service import UserService
from arcana.domain.value import UserId


class GetUserProfileRequest(BaseModel):
    """Get user profile request."""

    user_id: UserId


class GetUserProfileUseCase(BaseUseCase):
    """Use case for reading a user's full profile."""

    def __init__(self, user_service: UserService) -> None:
        self.user_service = user_service

    async def execute(self, request: GetUserProfileRequest) -> UserProfileView:
        """Load the profile.

        Raises:
            NotFoundError: If user not found
        """
        user = await self.user_service.get_by_id(request.user_id)
        return UserProfileView.from_user(user)
