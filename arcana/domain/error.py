"""Domain layer errors."""


class DomainError(Exception):
    """Base domain error."""

    pass


class ValidationError(DomainError):
    """Domain validation error."""

    pass


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class DuplicateUserError(DomainError):
    """Raised when a write collides with a unique user field."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"A user with this {field} already exists")


class EmailAlreadyLinkedError(DomainError):
    """Raised when a first login presents an email owned by another account.

    Accounts are never merged on email alone: two provider accounts that
    share an address are distinct people until proven otherwise.
    """

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"Email {email} is already linked to a different account")


class NoEmailFromProviderError(DomainError):
    """Raised when the OAuth provider profile carries no email address."""

    def __init__(self, provider: str):
        self.provider = provider
        super().__init__(f"No email provided by {provider}")


class OnboardingRegressionError(ValidationError):
    """Raised when an onboarding update would move the user backwards."""

    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(
            f"Onboarding cannot move back from '{current}' to '{requested}'"
        )


class OAuthError(DomainError):
    """Raised when the OAuth provider rejects or fails the grant exchange."""

    pass
