"""Google infrastructure providers."""

from dishka import Scope, provide

from arcana.adapter.google.client import GoogleOAuthClient, RealGoogleOAuthClient
from arcana.config import AuthSettings
from arcana.util.di.base import ProviderBase


class GoogleProvider(ProviderBase):
    """Google component base."""

    __mock_component__ = "google"


class ProdGoogleProvider(GoogleProvider):
    """Production Google provider."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_google_oauth_client(self, auth_settings: AuthSettings) -> GoogleOAuthClient:
        """Provide Google OAuth client."""
        return RealGoogleOAuthClient(
            client_id=auth_settings.google.client_id,
            client_secret=auth_settings.google.client_secret,
            redirect_uri=auth_settings.google.callback_url,
        )
