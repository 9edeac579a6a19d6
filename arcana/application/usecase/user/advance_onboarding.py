"""Advance onboarding use case."""

from pydantic import BaseModel

from arcana.application.usecase.base import BaseUseCase
from arcana.application.view import OnboardingView
from arcana.domain.service import UserService
from arcana.domain.value import OnboardingStep, UserId


class AdvanceOnboardingRequest(BaseModel):
    user_id: UserId
    step: OnboardingStep


class AdvanceOnboardingUseCase(BaseUseCase):
    """Use case for moving a user through onboarding."""

    def __init__(self, user_service: UserService) -> None:
        self.user_service = user_service

    async def execute(self, request: AdvanceOnboardingRequest) -> OnboardingView:
        """Advance to `request.step`.

        Raises:
            NotFoundError: If user not found
            OnboardingRegressionError: If the step is earlier than the current one
        """
        user = await self.user_service.advance_onboarding(
            request.user_id, request.step
        )
        return OnboardingView.from_model(user.onboarding)
