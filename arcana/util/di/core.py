"""Core DI providers (non-mockable)."""

from dishka import Scope, from_context, provide

from arcana.config import AuthSettings, Settings
from arcana.util.di.base import ProviderBase


class ProdConfigProvider(ProviderBase):
    """Production config provider - concrete, no mocks needed.

    Settings are loaded once by the entry point and handed to the container
    as context, so the app factory and the providers share one instance.
    """

    settings = from_context(provides=Settings, scope=Scope.APP)

    @provide(scope=Scope.APP)
    def provide_auth_settings(self, settings: Settings) -> AuthSettings:
        """Provide auth settings."""
        return settings.auth
