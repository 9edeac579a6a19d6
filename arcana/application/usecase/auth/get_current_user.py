"""Get current user use case."""

from uuid import UUID

from pydantic import BaseModel

from arcana.application.usecase.base import BaseUseCase
from arcana.domain.model import User
from arcana.domain.service import JWTService, UserService
from arcana.domain.value import UserId
from arcana.util.jwt import TokenMalformedError, TokenPayload


class GetCurrentUserRequest(BaseModel):
    """Get current user request."""

    token: str  # Bearer token


class GetCurrentUserResponse(BaseModel):
    """Get current user response."""

    user: User
    claims: TokenPayload


class GetCurrentUserUseCase(BaseUseCase):
    """Use case for resolving a bearer token to the user it was issued to."""

    def __init__(self, jwt_service: JWTService, user_service: UserService) -> None:
        """Initialize get current user use case.

        Args:
            jwt_service: JWT token domain service
            user_service: User domain service
        """
        self.jwt_service = jwt_service
        self.user_service = user_service

    async def execute(self, request: GetCurrentUserRequest) -> GetCurrentUserResponse:
        """Verify the token and load its subject. Read-only.

        Raises:
            JWTError: If token is invalid, malformed or expired
            NotFoundError: If the subject no longer exists
        """
        claims = self.jwt_service.verify_token(request.token)

        try:
            user_id = UserId(UUID(claims.user_id))
        except ValueError as e:
            raise TokenMalformedError("Token subject is not a user ID") from e

        user = await self.user_service.get_by_id(user_id)
        return GetCurrentUserResponse(user=user, claims=claims)
