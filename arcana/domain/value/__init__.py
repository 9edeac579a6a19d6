"""Domain value objects."""

from arcana.domain.value.identifiers import AuthSessionId, UserId
from arcana.domain.value.types import AuthProvider, OAuthProfile, OnboardingStep

__all__ = [
    # Identifiers
    "AuthSessionId",
    "UserId",
    # Types
    "AuthProvider",
    "OAuthProfile",
    "OnboardingStep",
]
