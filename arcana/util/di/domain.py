"""Domain layer DI providers."""

from dishka import Scope, provide

from arcana.config import AuthSettings
from arcana.domain.repository import AuthSessionRepository, UserRepository
from arcana.domain.service import (
    AuthService,
    JWTService,
    OAuthClient,
    SessionService,
    UserService,
)
from arcana.domain.value import AuthProvider
from arcana.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session lifecycle.
    Each HTTP request gets fresh service instances with their own transaction.
    """

    scope = Scope.REQUEST

    @provide
    def get_auth_service(
        self, oauth_clients: dict[AuthProvider, OAuthClient]
    ) -> AuthService:
        """Provide authentication domain service.

        Args:
            oauth_clients: Dictionary mapping providers to their OAuth clients

        Returns:
            AuthService configured with all available OAuth clients
        """
        return AuthService(oauth_clients=oauth_clients)

    @provide
    def get_jwt_service(self, auth_settings: AuthSettings) -> JWTService:
        """Provide JWT token domain service."""
        return JWTService(auth_settings=auth_settings)

    @provide
    def get_user_service(self, user_repository: UserRepository) -> UserService:
        """Provide user domain service."""
        return UserService(user_repository=user_repository)

    @provide
    def get_session_service(
        self, session_repository: AuthSessionRepository, auth_settings: AuthSettings
    ) -> SessionService:
        """Provide session domain service."""
        return SessionService(
            session_repository=session_repository, auth_settings=auth_settings
        )
