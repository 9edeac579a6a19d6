"""Unit tests for UserService."""

from datetime import datetime, timezone
from uuid import uuid4

import pytest
from pydantic import ValidationError

from arcana.domain.error import (
    DuplicateUserError,
    NotFoundError,
    OnboardingRegressionError,
)
from arcana.domain.service import UserService
from arcana.domain.value import AuthProvider, OAuthProfile, OnboardingStep, UserId
from arcana.persistence.repository.inmemory import InMemoryUserRepository


def make_profile(sub: str = "google-1", email: str = "Ada@Example.com") -> OAuthProfile:
    return OAuthProfile(
        provider=AuthProvider.GOOGLE,
        provider_user_id=sub,
        display_name="Ada Lovelace",
        email=email,
        avatar_url="https://example.com/ada.jpg",
    )


@pytest.fixture
def service():
    return UserService(InMemoryUserRepository())


class TestCreateFromProfile:
    """Tests for first-login user creation."""

    @pytest.mark.asyncio
    async def test_new_user_gets_defaults(self, service):
        user = await service.create_from_profile(make_profile())

        assert user.email == "ada@example.com"
        assert user.google_id == "google-1"
        assert user.google_image == "https://example.com/ada.jpg"
        assert user.profile_image is None
        assert user.onboarding.step == OnboardingStep.WELCOME
        assert user.onboarding.completed is False
        assert user.stats.total_entries == 0
        assert user.stats.streak_days == 0
        assert user.preferences.notifications.reminder_time == "20:00"
        assert user.preferences.notifications.enabled is True

    @pytest.mark.asyncio
    async def test_duplicate_google_id_is_rejected(self, service):
        await service.create_from_profile(make_profile())

        with pytest.raises(DuplicateUserError) as exc_info:
            await service.create_from_profile(make_profile(email="other@example.com"))
        assert exc_info.value.field == "google_id"

    @pytest.mark.asyncio
    async def test_email_lookup_ignores_case(self, service):
        created = await service.create_from_profile(make_profile())

        assert (await service.find_by_email(" ADA@example.COM ")).id == created.id


class TestUpdates:
    """Tests for profile, preference and onboarding updates."""

    @pytest.mark.asyncio
    async def test_get_missing_user_raises(self, service):
        with pytest.raises(NotFoundError):
            await service.get_by_id(UserId(uuid4()))

    @pytest.mark.asyncio
    async def test_update_profile_leaves_unset_fields(self, service):
        user = await service.create_from_profile(make_profile())

        updated = await service.update_profile(user.id, name="Countess")

        assert updated.name == "Countess"
        assert updated.email == user.email
        assert updated.profile_image is None
        assert updated.updated_at >= user.updated_at

    @pytest.mark.asyncio
    async def test_preferences_merge_partially(self, service):
        user = await service.create_from_profile(make_profile())

        updated = await service.update_preferences(
            user.id, {"reminder_time": "07:30"}
        )

        notifications = updated.preferences.notifications
        assert notifications.reminder_time == "07:30"
        assert notifications.daily_reminder is True

    @pytest.mark.asyncio
    async def test_bad_reminder_time_is_rejected(self, service):
        user = await service.create_from_profile(make_profile())

        with pytest.raises(ValidationError):
            await service.update_preferences(user.id, {"reminder_time": "25:00"})

    @pytest.mark.asyncio
    async def test_onboarding_advances_and_completes(self, service):
        user = await service.create_from_profile(make_profile())

        await service.advance_onboarding(user.id, OnboardingStep.FIRST_ENTRY)
        done = await service.advance_onboarding(user.id, OnboardingStep.COMPLETED)

        assert done.onboarding.step == OnboardingStep.COMPLETED
        assert done.onboarding.completed is True
        assert done.onboarding.completed_at is not None
        assert done.onboarding.completed_at <= datetime.now(timezone.utc)

    @pytest.mark.asyncio
    async def test_onboarding_never_regresses(self, service):
        user = await service.create_from_profile(make_profile())
        await service.advance_onboarding(user.id, OnboardingStep.PERSONA_INTRO)

        with pytest.raises(OnboardingRegressionError):
            await service.advance_onboarding(user.id, OnboardingStep.WELCOME)

        stored = await service.get_by_id(user.id)
        assert stored.onboarding.step == OnboardingStep.PERSONA_INTRO

    @pytest.mark.asyncio
    async def test_delete_returns_removed_user(self, service):
        user = await service.create_from_profile(make_profile())

        deleted = await service.delete(user.id)

        assert deleted.id == user.id
        with pytest.raises(NotFoundError):
            await service.get_by_id(user.id)
