"""Domain value objects.

Value objects are immutable and defined by their values, not identity.
"""

from enum import Enum

from pydantic import field_validator

from arcana.domain.value.common import ValueObject


class AuthProvider(str, Enum):
    """Supported authentication providers."""

    GOOGLE = "google"


class OnboardingStep(str, Enum):
    """Onboarding progress, in the order a user moves through it.

    Steps only ever advance; see `OnboardingStep.can_advance_to`.
    """

    WELCOME = "welcome"
    FIRST_ENTRY = "first-entry"
    PERSONA_INTRO = "persona-intro"
    COMPLETED = "completed"

    @property
    def rank(self) -> int:
        return list(OnboardingStep).index(self)

    def can_advance_to(self, other: "OnboardingStep") -> bool:
        """True if moving to `other` keeps progress monotonic."""
        return other.rank >= self.rank


class OAuthProfile(ValueObject):
    """User profile returned by an OAuth provider.

    Explicit boundary type so nothing downstream handles the raw provider
    payload.
    """

    provider: AuthProvider
    provider_user_id: str  # Permanent ID from the provider (Google `sub`)
    display_name: str
    email: str | None = None
    avatar_url: str | None = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str | None) -> str | None:
        """Emails are compared case-insensitively; store lowercase."""
        if v is None:
            return None
        v = v.strip().lower()
        return v or None
