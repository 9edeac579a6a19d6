"""User use cases."""

from .advance_onboarding import AdvanceOnboardingUseCase
from .delete_user import DeleteUserUseCase
from .get_user_profile import GetUserProfileUseCase
from .get_user_stats import GetUserStatsUseCase
from .update_preferences import UpdatePreferencesUseCase
from .update_profile_image import UpdateProfileImageUseCase
from .update_user_profile import UpdateUserProfileUseCase

__all__ = [
    "AdvanceOnboardingUseCase",
    "DeleteUserUseCase",
    "GetUserProfileUseCase",
    "GetUserStatsUseCase",
    "UpdatePreferencesUseCase",
    "UpdateProfileImageUseCase",
    "UpdateUserProfileUseCase",
]
