"""Update profile image use case."""

from pydantic import BaseModel

from arcana.application.usecase.base import BaseUseCase
from arcana.application.view import CamelModel
from arcana.domain.service import UserService
from arcana.domain.value import UserId


class UpdateProfileImageRequest(BaseModel):
    user_id: UserId
    profile_image: str  # URL of an already-uploaded image


class UpdateProfileImageResponse(CamelModel):
    profile_image: str


class UpdateProfileImageUseCase(BaseUseCase):
    """Point the profile at a previously uploaded image."""

    def __init__(self, user_service: UserService) -> None:
        self.user_service = user_service

    async def execute(
        self, request: UpdateProfileImageRequest
    ) -> UpdateProfileImageResponse:
        user = await self.user_service.set_profile_image(
            request.user_id, request.profile_image
        )
        return UpdateProfileImageResponse(profile_image=user.profile_image or "")
