"""Domain model entities."""

from arcana.domain.model.auth_session import AuthSession
from arcana.domain.model.user import (
    NotificationPreferences,
    Onboarding,
    Preferences,
    User,
    UserStats,
)

__all__ = [
    "AuthSession",
    "NotificationPreferences",
    "Onboarding",
    "Preferences",
    "User",
    "UserStats",
]
