"""Logout use case."""

import logfire
from pydantic import BaseModel

from arcana.application.usecase.base import BaseUseCase
from arcana.domain.value import UserId


class LogoutRequest(BaseModel):
    user_id: UserId


class LogoutResponse(BaseModel):
    message: str


class LogoutUseCase(BaseUseCase):
    """Acknowledge a logout.

    Tokens are stateless and not revoked: the token stays valid until it
    expires, and the client is expected to discard it.
    """

    async def execute(self, request: LogoutRequest) -> LogoutResponse:
        logfire.info("User logged out", user_id=str(request.user_id))
        return LogoutResponse(message="Logged out successfully")
