"""Delete user use case."""

from pydantic import BaseModel

from arcana.application.usecase.base import BaseUseCase
from arcana.domain.service import UserService
from arcana.domain.value import UserId


class DeleteUserRequest(BaseModel):
    user_id: UserId


class DeleteUserResponse(BaseModel):
    """What was removed."""

    id: str
    email: str
    name: str


class DeleteUserUseCase(BaseUseCase):
    """Use case for deleting an account."""

    def __init__(self, user_service: UserService) -> None:
        self.user_service = user_service

    async def execute(self, request: DeleteUserRequest) -> DeleteUserResponse:
        """Delete the user.

        Raises:
            NotFoundError: If user not found
        """
        user = await self.user_service.delete(request.user_id)
        return DeleteUserResponse(id=str(user.id), email=user.email, name=user.name)
