"""Mappers for converting between database rows and domain models.

Domain models are immutable pydantic models, so mapping is manual. Nested
onboarding/stats blocks are flattened into columns; preferences are JSONB.
"""

from typing import Any, Dict
from uuid import UUID

from arcana.domain.model import (
    AuthSession,
    Onboarding,
    Preferences,
    User,
    UserStats,
)
from arcana.domain.value import AuthSessionId, OnboardingStep, UserId


def row_to_user(row: Dict[str, Any]) -> User:
    """Convert database row to User domain model."""
    return User(
        id=UserId(UUID(row["id"]) if isinstance(row["id"], str) else row["id"]),
        google_id=row.get("google_id"),
        email=row["email"],
        name=row["name"],
        profile_image=row.get("profile_image"),
        google_image=row.get("google_image"),
        preferences=Preferences.model_validate(row.get("preferences") or {}),
        onboarding=Onboarding(
            completed=row["onboarding_completed"],
            step=OnboardingStep(row["onboarding_step"]),
            completed_at=row.get("onboarding_completed_at"),
        ),
        stats=UserStats(
            total_entries=row["total_entries"],
            streak_days=row["streak_days"],
            last_entry_date=row.get("last_entry_date"),
            joined_at=row["joined_at"],
        ),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def user_to_dict(user: User) -> Dict[str, Any]:
    """Convert User domain model to a dict suitable for insert/update."""
    return {
        "id": user.id,
        "google_id": user.google_id,
        "email": user.email,
        "name": user.name,
        "profile_image": user.profile_image,
        "google_image": user.google_image,
        "preferences": user.preferences.model_dump(mode="json"),
        "onboarding_step": user.onboarding.step.value,
        "onboarding_completed": user.onboarding.completed,
        "onboarding_completed_at": user.onboarding.completed_at,
        "total_entries": user.stats.total_entries,
        "streak_days": user.stats.streak_days,
        "last_entry_date": user.stats.last_entry_date,
        "joined_at": user.stats.joined_at,
        "created_at": user.created_at,
        "updated_at": user.updated_at,
    }


def row_to_auth_session(row: Dict[str, Any]) -> AuthSession:
    """Convert database row to AuthSession domain model."""
    return AuthSession(
        id=AuthSessionId(row["id"]),
        data=row.get("data") or {},
        expires_at=row["expires_at"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def auth_session_to_dict(session: AuthSession) -> Dict[str, Any]:
    """Convert AuthSession domain model to database dict."""
    return session.model_dump()
