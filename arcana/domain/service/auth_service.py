"""Authentication domain service."""

from arcana.domain.value.types import AuthProvider, OAuthProfile

from .base import Service


class OAuthClient:
    """Generic OAuth client interface for all providers."""

    async def initiate_authorization(self, state: str) -> str:
        """Build the provider consent URL.

        Args:
            state: State parameter for CSRF protection

        Returns:
            Authorization URL to redirect user to
        """
        raise NotImplementedError

    async def complete_authorization(self, code: str) -> OAuthProfile:
        """Exchange an authorization grant for the user's profile.

        Args:
            code: Authorization code from OAuth callback

        Returns:
            Provider user profile
        """
        raise NotImplementedError

    @property
    def is_configured(self) -> bool:
        """Whether client credentials are present."""
        return True


class AuthService(Service):
    """Domain service for OAuth provider operations."""

    def __init__(self, oauth_clients: dict[AuthProvider, OAuthClient]) -> None:
        """Initialize auth service.

        Args:
            oauth_clients: Map of provider to OAuth client implementation
        """
        self.oauth_clients = oauth_clients

    def _client(self, provider: AuthProvider) -> OAuthClient:
        client = self.oauth_clients.get(provider)
        if not client:
            raise ValueError(f"Unsupported provider: {provider}")
        return client

    async def initiate_login(self, provider: AuthProvider, state: str) -> str:
        """Initiate OAuth login flow.

        Raises:
            ValueError: If provider not supported
        """
        return await self._client(provider).initiate_authorization(state)

    async def complete_login(self, provider: AuthProvider, code: str) -> OAuthProfile:
        """Complete OAuth login flow.

        Raises:
            ValueError: If provider not supported
        """
        return await self._client(provider).complete_authorization(code)

    def is_configured(self, provider: AuthProvider) -> bool:
        client = self.oauth_clients.get(provider)
        return bool(client and client.is_configured)
