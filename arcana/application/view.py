"""Client-facing user representations.

The mobile client expects camelCase keys; serialize with
`model_dump(mode="json", by_alias=True)`. Internal fields such as
`google_id` never appear here.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from arcana.domain.model import NotificationPreferences, Onboarding, User, UserStats


class CamelModel(BaseModel):
    """Base for views serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class NotificationsView(CamelModel):
    enabled: bool
    push_token: str | None
    daily_reminder: bool
    reminder_time: str

    @classmethod
    def from_model(cls, notifications: NotificationPreferences) -> "NotificationsView":
        return cls(**notifications.model_dump())


class PreferencesView(CamelModel):
    notifications: NotificationsView


class OnboardingView(CamelModel):
    completed: bool
    step: str
    completed_at: datetime | None

    @classmethod
    def from_model(cls, onboarding: Onboarding) -> "OnboardingView":
        return cls(
            completed=onboarding.completed,
            step=onboarding.step.value,
            completed_at=onboarding.completed_at,
        )


class StatsView(CamelModel):
    total_entries: int
    streak_days: int
    last_entry_date: datetime | None
    joined_at: datetime

    @classmethod
    def from_model(cls, stats: UserStats) -> "StatsView":
        return cls(**stats.model_dump())


class UserView(CamelModel):
    """Compact identity payload (login redirect, token verification)."""

    id: str
    email: str
    name: str
    profile_image: str | None
    google_image: str | None
    onboarding: OnboardingView
    stats: StatsView
    preferences: PreferencesView

    @classmethod
    def from_user(cls, user: User) -> "UserView":
        return cls(**cls._fields_from(user))

    @staticmethod
    def _fields_from(user: User) -> dict:
        return {
            "id": str(user.id),
            "email": user.email,
            "name": user.name,
            "profile_image": user.profile_image,
            "google_image": user.google_image,
            "onboarding": OnboardingView.from_model(user.onboarding),
            "stats": StatsView.from_model(user.stats),
            "preferences": PreferencesView(
                notifications=NotificationsView.from_model(
                    user.preferences.notifications
                )
            ),
        }


class UserProfileView(UserView):
    """Full profile returned by the user resource routes."""

    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "UserProfileView":
        return cls(
            **cls._fields_from(user),
            created_at=user.created_at,
            updated_at=user.updated_at,
        )
