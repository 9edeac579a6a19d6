"""Mock Google providers for testing."""

from dishka import Scope, provide

from arcana.adapter.google.client import GoogleOAuthClient, MockGoogleOAuthClient
from arcana.util.di.infrastructure.google import GoogleProvider


class MockGoogleProvider(GoogleProvider):
    """Mock Google provider using mock OAuth client."""

    __is_mock__ = True

    @provide(scope=Scope.APP)
    def get_google_oauth_client(self) -> GoogleOAuthClient:
        """Provide mock Google OAuth client."""
        return MockGoogleOAuthClient()
