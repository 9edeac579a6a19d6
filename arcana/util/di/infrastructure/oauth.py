"""OAuth infrastructure provider."""

from dishka import Scope, provide

from arcana.adapter.google.client import GoogleOAuthClient
from arcana.domain.service.auth_service import OAuthClient
from arcana.domain.value import AuthProvider
from arcana.util.di.base import ProviderBase


class OAuthAggregatorProvider(ProviderBase):
    """Provider that aggregates all OAuth clients into a dictionary."""

    scope = Scope.APP

    @provide(scope=Scope.APP)
    def get_oauth_clients(
        self, google_oauth_client: GoogleOAuthClient
    ) -> dict[AuthProvider, OAuthClient]:
        """Provide dictionary of all OAuth clients by provider."""
        return {AuthProvider.GOOGLE: google_oauth_client}
