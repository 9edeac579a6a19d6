"""User resource routes.

All routes need a bearer token. `/{user_id}` routes additionally require
the caller to be that user (403 ACCESS_DENIED otherwise).
"""

import re
from urllib.parse import urlparse

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Depends
from pydantic import Field, field_validator

from arcana.application.usecase.user import (
    AdvanceOnboardingUseCase,
    DeleteUserUseCase,
    GetUserProfileUseCase,
    GetUserStatsUseCase,
    UpdatePreferencesUseCase,
    UpdateProfileImageUseCase,
    UpdateUserProfileUseCase,
)
from arcana.application.usecase.user.advance_onboarding import AdvanceOnboardingRequest
from arcana.application.usecase.user.delete_user import DeleteUserRequest
from arcana.application.usecase.user.get_user_profile import GetUserProfileRequest
from arcana.application.usecase.user.get_user_stats import GetUserStatsRequest
from arcana.application.usecase.user.update_preferences import (
    UpdatePreferencesRequest,
)
from arcana.application.usecase.user.update_profile_image import (
    UpdateProfileImageRequest,
)
from arcana.application.usecase.user.update_user_profile import (
    UpdateUserProfileRequest,
)
from arcana.application.view import CamelModel, UserProfileView
from arcana.domain.model import User
from arcana.domain.value import OnboardingStep
from arcana.interface.api.envelope import Envelope, ok
from arcana.interface.api.security import require_auth, require_owner

router = APIRouter(prefix="/api/users", tags=["users"], route_class=DishkaRoute)

_REMINDER_TIME = re.compile(r"^([01]?[0-9]|2[0-3]):[0-5][0-9]$")


def _require_http_url(value: str) -> str:
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("must be an http(s) URL")
    return value


class NotificationsBody(CamelModel):
    """Partial notification preferences; unset fields stay unchanged."""

    enabled: bool | None = None
    push_token: str | None = None
    daily_reminder: bool | None = None
    reminder_time: str | None = None

    @field_validator("reminder_time")
    @classmethod
    def validate_reminder_time(cls, v: str | None) -> str | None:
        if v is not None and not _REMINDER_TIME.match(v):
            raise ValueError("reminderTime must be HH:MM (24h)")
        return v


class PreferencesBody(CamelModel):
    notifications: NotificationsBody


class UpdateUserBody(CamelModel):
    """Editable profile fields."""

    name: str | None = Field(None, min_length=1, max_length=100)
    profile_image: str | None = None
    preferences: PreferencesBody | None = None

    @field_validator("profile_image")
    @classmethod
    def validate_profile_image(cls, v: str | None) -> str | None:
        return _require_http_url(v) if v is not None else None


class ProfileImageBody(CamelModel):
    profile_image: str

    @field_validator("profile_image")
    @classmethod
    def validate_profile_image(cls, v: str) -> str:
        return _require_http_url(v)


class OnboardingBody(CamelModel):
    step: OnboardingStep


def _notifications(body: PreferencesBody | None) -> dict | None:
    if body is None:
        return None
    return body.notifications.model_dump(exclude_unset=True)


# /me routes (declared before /{user_id} so "me" is never parsed as an ID)


@router.get("/me", response_model=Envelope)
async def get_me(
    use_case: FromDishka[GetUserProfileUseCase],
    user: User = Depends(require_auth),
) -> Envelope:
    """Full profile of the caller."""
    return ok(await use_case.execute(GetUserProfileRequest(user_id=user.id)))


@router.put("/me", response_model=Envelope)
async def update_me(
    body: UpdateUserBody,
    use_case: FromDishka[UpdateUserProfileUseCase],
    user: User = Depends(require_auth),
) -> Envelope:
    """Update the caller's name, profile image or preferences.

    Example:
        PUT /api/users/me
        {"name": "Ada", "preferences": {"notifications": {"reminderTime": "07:30"}}}
    """
    return ok(await _update(use_case, user, body))


@router.get("/me/stats", response_model=Envelope)
async def get_my_stats(
    use_case: FromDishka[GetUserStatsUseCase],
    user: User = Depends(require_auth),
) -> Envelope:
    return ok(await use_case.execute(GetUserStatsRequest(user_id=user.id)))


@router.patch("/me/preferences", response_model=Envelope)
async def update_my_preferences(
    body: PreferencesBody,
    use_case: FromDishka[UpdatePreferencesUseCase],
    user: User = Depends(require_auth),
) -> Envelope:
    return ok(
        await use_case.execute(
            UpdatePreferencesRequest(user_id=user.id, notifications=_notifications(body))
        )
    )


@router.patch("/me/profile-image", response_model=Envelope)
async def update_my_profile_image(
    body: ProfileImageBody,
    use_case: FromDishka[UpdateProfileImageUseCase],
    user: User = Depends(require_auth),
) -> Envelope:
    return ok(
        await use_case.execute(
            UpdateProfileImageRequest(user_id=user.id, profile_image=body.profile_image)
        )
    )


@router.patch("/me/onboarding", response_model=Envelope)
async def advance_my_onboarding(
    body: OnboardingBody,
    use_case: FromDishka[AdvanceOnboardingUseCase],
    user: User = Depends(require_auth),
) -> Envelope:
    """Advance onboarding. Moving to an earlier step is a 400."""
    return ok(
        await use_case.execute(AdvanceOnboardingRequest(user_id=user.id, step=body.step))
    )


# /{user_id} routes (ownership-gated)


@router.get("/{user_id}", response_model=Envelope)
async def get_user(
    use_case: FromDishka[GetUserProfileUseCase],
    user: User = Depends(require_owner),
) -> Envelope:
    return ok(await use_case.execute(GetUserProfileRequest(user_id=user.id)))


@router.put("/{user_id}", response_model=Envelope)
async def update_user(
    body: UpdateUserBody,
    use_case: FromDishka[UpdateUserProfileUseCase],
    user: User = Depends(require_owner),
) -> Envelope:
    return ok(await _update(use_case, user, body))


@router.delete("/{user_id}", response_model=Envelope)
async def delete_user(
    use_case: FromDishka[DeleteUserUseCase],
    user: User = Depends(require_owner),
) -> Envelope:
    """Delete the caller's own account."""
    return ok(await use_case.execute(DeleteUserRequest(user_id=user.id)))


@router.get("/{user_id}/stats", response_model=Envelope)
async def get_user_stats(
    use_case: FromDishka[GetUserStatsUseCase],
    user: User = Depends(require_owner),
) -> Envelope:
    return ok(await use_case.execute(GetUserStatsRequest(user_id=user.id)))


@router.patch("/{user_id}/preferences", response_model=Envelope)
async def update_user_preferences(
    body: PreferencesBody,
    use_case: FromDishka[UpdatePreferencesUseCase],
    user: User = Depends(require_owner),
) -> Envelope:
    return ok(
        await use_case.execute(
            UpdatePreferencesRequest(user_id=user.id, notifications=_notifications(body))
        )
    )


@router.patch("/{user_id}/profile-image", response_model=Envelope)
async def update_user_profile_image(
    body: ProfileImageBody,
    use_case: FromDishka[UpdateProfileImageUseCase],
    user: User = Depends(require_owner),
) -> Envelope:
    return ok(
        await use_case.execute(
            UpdateProfileImageRequest(user_id=user.id, profile_image=body.profile_image)
        )
    )


async def _update(
    use_case: UpdateUserProfileUseCase, user: User, body: UpdateUserBody
) -> UserProfileView:
    return await use_case.execute(
        UpdateUserProfileRequest(
            user_id=user.id,
            name=body.name,
            profile_image=body.profile_image,
            notifications=_notifications(body.preferences),
        )
    )
