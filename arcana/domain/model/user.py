"""User aggregate root.

A user is created on their first Google login and refreshed on every
subsequent one. Profile images are uploaded separately; `google_image` is
whatever the provider last reported.
"""

import re
from datetime import datetime, timezone
from typing import Optional

from pydantic import Field, field_validator

from arcana.domain.model.common import DomainModel
from arcana.domain.value import OnboardingStep, UserId

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_REMINDER_TIME_PATTERN = re.compile(r"^([01]?[0-9]|2[0-3]):[0-5][0-9]$")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class NotificationPreferences(DomainModel):
    """Notification settings."""

    enabled: bool = True
    push_token: Optional[str] = None  # Expo push token
    daily_reminder: bool = True
    reminder_time: str = "20:00"

    @field_validator("reminder_time")
    @classmethod
    def validate_reminder_time(cls, v: str) -> str:
        if not _REMINDER_TIME_PATTERN.match(v):
            raise ValueError("reminder_time must be HH:MM (24h)")
        return v


class Preferences(DomainModel):
    """User preferences."""

    notifications: NotificationPreferences = Field(
        default_factory=NotificationPreferences
    )


class Onboarding(DomainModel):
    """Onboarding progress."""

    completed: bool = False
    step: OnboardingStep = OnboardingStep.WELCOME
    completed_at: Optional[datetime] = None


class UserStats(DomainModel):
    """Usage statistics. All counters are non-negative."""

    total_entries: int = Field(default=0, ge=0)
    streak_days: int = Field(default=0, ge=0)
    last_entry_date: Optional[datetime] = None
    joined_at: datetime = Field(default_factory=_utcnow)


class User(DomainModel):
    """User aggregate root.

    Email and google_id are globally unique (enforced by the store).
    """

    id: UserId
    google_id: Optional[str] = None
    email: str
    name: str = Field(min_length=1)
    profile_image: Optional[str] = None  # Uploaded image URL (object storage)
    google_image: Optional[str] = None  # Provider avatar URL
    preferences: Preferences = Field(default_factory=Preferences)
    onboarding: Onboarding = Field(default_factory=Onboarding)
    stats: UserStats = Field(default_factory=UserStats)
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Lowercase and sanity-check the address."""
        v = v.strip().lower()
        if not _EMAIL_PATTERN.match(v):
            raise ValueError("email must be a valid email address")
        return v
