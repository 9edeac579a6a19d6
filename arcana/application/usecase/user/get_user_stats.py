"""Get user stats use case."""

from datetime import datetime, timezone

from pydantic import BaseModel, Field

from arcana.application.usecase.base import BaseUseCase
from arcana.application.view import CamelModel
from arcana.domain.service import UserService
from arcana.domain.value import UserId


class GetUserStatsRequest(BaseModel):
    user_id: UserId
    now: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class UserStatsResponse(CamelModel):
    """Stored counters plus derived ages, in whole days."""

    total_entries: int
    streak_days: int
    last_entry_date: datetime | None
    joined_at: datetime
    account_age: int
    last_activity: int | None


class GetUserStatsUseCase(BaseUseCase):
    """Use case for reading usage statistics."""

    def __init__(self, user_service: UserService) -> None:
        self.user_service = user_service

    async def execute(self, request: GetUserStatsRequest) -> UserStatsResponse:
        """Load stats and derive account age and days since last entry.

        Raises:
            NotFoundError: If user not found
        """
        user = await self.user_service.get_by_id(request.user_id)
        stats = user.stats
        last_activity = (
            (request.now - stats.last_entry_date).days
            if stats.last_entry_date
            else None
        )
        return UserStatsResponse(
            total_entries=stats.total_entries,
            streak_days=stats.streak_days,
            last_entry_date=stats.last_entry_date,
            joined_at=stats.joined_at,
            account_age=(request.now - stats.joined_at).days,
            last_activity=last_activity,
        )
