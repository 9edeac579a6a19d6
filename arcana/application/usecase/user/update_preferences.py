"""Update notification preferences use case."""

from typing import Any

from pydantic import BaseModel

from arcana.application.usecase.base import BaseUseCase
from arcana.application.view import NotificationsView, PreferencesView
from arcana.domain.service import UserService
from arcana.domain.value import UserId


class UpdatePreferencesRequest(BaseModel):
    user_id: UserId
    notifications: dict[str, Any]


class UpdatePreferencesUseCase(BaseUseCase):
    """Use case for merging notification preferences."""

    def __init__(self, user_service: UserService) -> None:
        self.user_service = user_service

    async def execute(self, request: UpdatePreferencesRequest) -> PreferencesView:
        """Merge the given notification fields into the stored preferences.

        Raises:
            NotFoundError: If user not found
            pydantic.ValidationError: If reminder_time is not HH:MM
        """
        user = await self.user_service.update_preferences(
            request.user_id, request.notifications
        )
        return PreferencesView(
            notifications=NotificationsView.from_model(user.preferences.notifications)
        )
