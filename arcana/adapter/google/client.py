"""Google OAuth 2.0 client implementation.

Authorization code flow against Google's endpoints. The `state` parameter is
generated and checked by the caller (it lives in the session), so this client
is stateless.
"""

from urllib.parse import urlencode

import httpx
import logfire

from arcana.domain.error import OAuthError
from arcana.domain.service.auth_service import OAuthClient
from arcana.domain.value.types import AuthProvider, OAuthProfile


class GoogleOAuthError(OAuthError):
    """Google OAuth error."""

    pass


class GoogleOAuthClient(OAuthClient):
    """Base class for Google OAuth clients.

    Provides type distinction for dependency injection.
    """

    pass


class RealGoogleOAuthClient(GoogleOAuthClient):
    """Google OAuth 2.0 client (scopes: profile, email)."""

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize Google OAuth client.

        Args:
            client_id: Google OAuth client ID
            client_secret: Google OAuth client secret
            redirect_uri: Callback URL registered with Google
            transport: Optional httpx transport, used to stub Google in tests
        """
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.transport = transport

        # OAuth endpoints
        self.authorize_url = "https://accounts.google.com/o/oauth2/v2/auth"
        self.token_url = "https://oauth2.googleapis.com/token"
        self.user_info_url = "https://openidconnect.googleapis.com/v1/userinfo"

    @property
    def is_configured(self) -> bool:
        return bool(self.client_id and self.client_secret)

    async def initiate_authorization(self, state: str) -> str:
        """Build the Google consent URL.

        Args:
            state: State parameter for CSRF protection

        Returns:
            Authorization URL to redirect user to
        """
        params = {
            "response_type": "code",
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "scope": "profile email",
            "state": state,
        }

        auth_url = f"{self.authorize_url}?{urlencode(params)}"

        logfire.info(
            "Google OAuth authorization initiated",
            redirect_uri=self.redirect_uri,
        )

        return auth_url

    async def complete_authorization(self, code: str) -> OAuthProfile:
        """Complete Google OAuth authorization flow.

        Args:
            code: Authorization code from Google callback

        Returns:
            Profile reported by Google

        Raises:
            GoogleOAuthError: If OAuth flow fails
        """
        access_token = await self._exchange_code_for_token(code)
        user_info = await self._get_user_info(access_token)

        try:
            google_id = str(user_info["sub"])
        except KeyError as e:
            raise GoogleOAuthError("User info response has no subject") from e

        logfire.info("Google OAuth completed", google_id=google_id)

        return OAuthProfile(
            provider=AuthProvider.GOOGLE,
            provider_user_id=google_id,
            display_name=user_info.get("name") or user_info.get("email") or "User",
            email=user_info.get("email"),  # Absent if the email scope was refused
            avatar_url=user_info.get("picture"),
        )

    async def _exchange_code_for_token(self, code: str) -> str:
        """Exchange authorization code for access token.

        Raises:
            GoogleOAuthError: If token exchange fails
        """
        data = {
            "code": code,
            "grant_type": "authorization_code",
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "redirect_uri": self.redirect_uri,
        }

        try:
            async with httpx.AsyncClient(transport=self.transport) as client:
                response = await client.post(
                    self.token_url,
                    data=data,
                    headers={"Content-Type": "application/x-www-form-urlencoded"},
                    timeout=30.0,
                )

                if response.status_code != 200:
                    logfire.error(
                        "Google token exchange failed",
                        status_code=response.status_code,
                        error=response.text,
                    )
                    raise GoogleOAuthError(
                        f"Token exchange failed: {response.status_code}"
                    )

                try:
                    return response.json()["access_token"]
                except (ValueError, TypeError, KeyError) as e:
                    logfire.error("Google token response malformed", error=response.text)
                    raise GoogleOAuthError("Token response has no access token") from e

        except httpx.HTTPError as e:
            logfire.error("Google token exchange HTTP error", error=str(e))
            raise GoogleOAuthError(f"HTTP error during token exchange: {e}") from e

    async def _get_user_info(self, access_token: str) -> dict:
        """Get the OpenID userinfo document.

        Raises:
            GoogleOAuthError: If API request fails
        """
        try:
            async with httpx.AsyncClient(transport=self.transport) as client:
                response = await client.get(
                    self.user_info_url,
                    headers={"Authorization": f"Bearer {access_token}"},
                    timeout=30.0,
                )

                if response.status_code != 200:
                    logfire.error(
                        "Google user info request failed",
                        status_code=response.status_code,
                        error=response.text,
                    )
                    raise GoogleOAuthError(
                        f"User info request failed: {response.status_code}"
                    )

                try:
                    user_info = response.json()
                except ValueError as e:
                    logfire.error("Google user info malformed", error=response.text)
                    raise GoogleOAuthError("User info response is not JSON") from e
                if not isinstance(user_info, dict):
                    raise GoogleOAuthError("User info response is not an object")
                return user_info

        except httpx.HTTPError as e:
            logfire.error("Google user info HTTP error", error=str(e))
            raise GoogleOAuthError(f"HTTP error fetching user info: {e}") from e


class MockGoogleOAuthClient(GoogleOAuthClient):
    """Mock Google OAuth client for testing.

    Returns deterministic test data without making real API calls. Tests
    register a profile per authorization code; codes starting with
    "invalid" are rejected the way Google rejects a bad grant.
    """

    DEFAULT_PROFILE = OAuthProfile(
        provider=AuthProvider.GOOGLE,
        provider_user_id="mockgoogle123",
        display_name="Mock Google User",
        email="mock@gmail.com",
        avatar_url="https://example.com/avatar.jpg",
    )

    def __init__(self, profiles: dict[str, OAuthProfile] | None = None) -> None:
        self.profiles: dict[str, OAuthProfile] = dict(profiles or {})

    def register(self, code: str, profile: OAuthProfile) -> None:
        """Make `code` resolve to `profile`."""
        self.profiles[code] = profile

    async def initiate_authorization(self, state: str) -> str:
        """Return mock authorization URL."""
        return f"https://accounts.google.com/o/oauth2/v2/auth?state={state}&mock=true"

    async def complete_authorization(self, code: str) -> OAuthProfile:
        """Return the registered (or default) profile."""
        if code.startswith("invalid"):
            raise GoogleOAuthError("Token exchange failed: 400")
        return self.profiles.get(code, self.DEFAULT_PROFILE)
