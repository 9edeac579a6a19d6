"""Initiate login use case."""

import secrets
from urllib.parse import urlparse

import logfire
from pydantic import BaseModel

from arcana.application.usecase.base import BaseUseCase
from arcana.config import AuthSettings
from arcana.domain.service import AuthService, SessionService
from arcana.domain.value import AuthProvider


class InitiateLoginRequest(BaseModel):
    """Initiate login request."""

    provider: AuthProvider = AuthProvider.GOOGLE
    redirect_uri: str | None = None  # Where the native client wants the token


class InitiateLoginResponse(BaseModel):
    """Initiate login response."""

    authorization_url: str
    session_cookie: str  # Signed session ID to set on the redirect


class InitiateLoginUseCase(BaseUseCase):
    """Start an OAuth handshake and remember what the callback will need."""

    def __init__(
        self,
        auth_service: AuthService,
        session_service: SessionService,
        auth_settings: AuthSettings,
    ) -> None:
        self.auth_service = auth_service
        self.session_service = session_service
        self.auth_settings = auth_settings

    async def execute(self, request: InitiateLoginRequest) -> InitiateLoginResponse:
        """Execute initiate login flow.

        Steps:
        1. Generate the OAuth `state`
        2. Keep the client redirect URI only if its scheme is allowed
        3. Store both in a fresh session
        4. Build the provider consent URL

        Raises:
            ValueError: If provider not supported
        """
        state = secrets.token_urlsafe(32)
        redirect_uri = self._accepted_redirect_uri(request.redirect_uri)

        session = await self.session_service.create(
            {"oauth_state": state, "redirect_uri": redirect_uri}
        )
        authorization_url = await self.auth_service.initiate_login(
            request.provider, state
        )

        logfire.info(
            "OAuth login initiated",
            provider=request.provider.value,
            custom_redirect=redirect_uri is not None,
        )

        return InitiateLoginResponse(
            authorization_url=authorization_url,
            session_cookie=self.session_service.sign(session.id),
        )

    def _accepted_redirect_uri(self, redirect_uri: str | None) -> str | None:
        if not redirect_uri:
            return None
        scheme = urlparse(redirect_uri).scheme
        if scheme not in self.auth_settings.allowed_redirect_schemes:
            logfire.warn("Rejected client redirect URI", scheme=scheme)
            return None
        return redirect_uri
