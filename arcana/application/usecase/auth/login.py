"""Login use case (OAuth callback)."""

import secrets
from enum import Enum

import logfire
from pydantic import BaseModel

from arcana.application.usecase.base import BaseUseCase
from arcana.application.view import UserView
from arcana.config import AuthSettings
from arcana.domain.error import (
    DuplicateUserError,
    EmailAlreadyLinkedError,
    NoEmailFromProviderError,
    OAuthError,
)
from arcana.domain.model import AuthSession, User
from arcana.domain.service import AuthService, JWTService, SessionService, UserService
from arcana.domain.value import AuthProvider, OAuthProfile


class LoginFailureReason(str, Enum):
    """Coded reasons a callback can fail, as shown to the client."""

    AUTHENTICATION_FAILED = "authentication_failed"
    NO_EMAIL = "no_email"
    USER_CREATION_FAILED = "user_creation_failed"
    TOKEN_GENERATION_FAILED = "token_generation_failed"
    ACCOUNT_CONFLICT = "account_conflict"


class LoginError(Exception):
    """Terminal failure of an OAuth callback.

    The original exception is chained as `__cause__` for logging; only
    `reason` ever reaches the client. `unexpected` marks failures caused by
    a bug or an outage rather than by the user or the provider.
    """

    def __init__(
        self, reason: LoginFailureReason, message: str, unexpected: bool = False
    ) -> None:
        self.reason = reason
        self.unexpected = unexpected
        super().__init__(message)


class LoginRequest(BaseModel):
    """Login request from OAuth callback.

    These parameters come from the OAuth provider in the callback URL, plus
    the session cookie set when the login was initiated.
    """

    provider: AuthProvider = AuthProvider.GOOGLE
    code: str | None = None  # OAuth authorization code
    state: str | None = None  # Must match the state stored in the session
    error: str | None = None  # Set by the provider when the user declined
    session_cookie: str | None = None


class LoginResponse(BaseModel):
    """Login response."""

    token: str
    user: UserView
    redirect_uri: str
    is_new_user: bool


class LoginUseCase(BaseUseCase):
    """Use case for user login via OAuth."""

    def __init__(
        self,
        auth_service: AuthService,
        jwt_service: JWTService,
        user_service: UserService,
        session_service: SessionService,
        auth_settings: AuthSettings,
    ) -> None:
        """Initialize login use case.

        Args:
            auth_service: Authentication domain service
            jwt_service: JWT token domain service
            user_service: User domain service
            session_service: Session domain service (OAuth state, redirect URI)
            auth_settings: Authentication settings
        """
        self.auth_service = auth_service
        self.jwt_service = jwt_service
        self.user_service = user_service
        self.session_service = session_service
        self.auth_settings = auth_settings

    async def execute(self, request: LoginRequest) -> LoginResponse:
        """Execute login flow.

        Steps:
        1. Take the session (single use) and check the OAuth state
        2. Exchange the grant for the provider profile
        3. Find the user by provider ID, refresh or create
        4. Mint a token for the persisted user

        Raises:
            LoginError: On any failure, with the client-facing reason
        """
        session = await self._take_session(request)
        redirect_uri = (
            session.data.get("redirect_uri")
            or self.auth_settings.default_mobile_redirect_uri
        )

        if request.error or not request.code:
            raise LoginError(
                LoginFailureReason.AUTHENTICATION_FAILED,
                f"Provider returned no grant: {request.error or 'missing code'}",
            )

        try:
            profile = await self.auth_service.complete_login(
                request.provider, request.code
            )
        except OAuthError as e:
            raise LoginError(LoginFailureReason.AUTHENTICATION_FAILED, str(e)) from e
        except Exception as e:
            raise LoginError(
                LoginFailureReason.AUTHENTICATION_FAILED, str(e), unexpected=True
            ) from e

        with logfire.span(
            "login_user",
            provider=profile.provider.value,
            provider_user_id=profile.provider_user_id,
        ):
            try:
                user, is_new_user = await self._resolve_user(profile)
            except NoEmailFromProviderError as e:
                raise LoginError(LoginFailureReason.NO_EMAIL, str(e)) from e
            except EmailAlreadyLinkedError as e:
                raise LoginError(LoginFailureReason.ACCOUNT_CONFLICT, str(e)) from e
            except Exception as e:
                raise LoginError(
                    LoginFailureReason.USER_CREATION_FAILED, str(e), unexpected=True
                ) from e

            try:
                token = self.jwt_service.create_token(user)
            except Exception as e:
                raise LoginError(
                    LoginFailureReason.TOKEN_GENERATION_FAILED, str(e), unexpected=True
                ) from e

            logfire.info(
                "User logged in", user_id=str(user.id), is_new_user=is_new_user
            )

        return LoginResponse(
            token=token,
            user=UserView.from_user(user),
            redirect_uri=redirect_uri,
            is_new_user=is_new_user,
        )

    async def _take_session(self, request: LoginRequest) -> AuthSession:
        """Load and destroy the handshake session, verifying the state."""
        session = await self.session_service.load(request.session_cookie)
        if session is None:
            raise LoginError(
                LoginFailureReason.AUTHENTICATION_FAILED,
                "No live session for OAuth callback",
            )
        await self.session_service.destroy(session)

        expected = session.data.get("oauth_state") or ""
        if not request.state or not secrets.compare_digest(expected, request.state):
            logfire.warn("OAuth state mismatch")
            raise LoginError(
                LoginFailureReason.AUTHENTICATION_FAILED, "OAuth state mismatch"
            )
        return session

    async def _resolve_user(self, profile: OAuthProfile) -> tuple[User, bool]:
        """Find-or-create by provider ID. Never matches on email alone.

        Returns:
            The persisted user and whether it was just created
        """
        if not profile.email:
            raise NoEmailFromProviderError(profile.provider.value)

        existing = await self.user_service.find_by_google_id(profile.provider_user_id)
        if existing:
            return await self.user_service.refresh_from_profile(existing, profile), False

        if await self.user_service.find_by_email(profile.email):
            raise EmailAlreadyLinkedError(profile.email)

        try:
            return await self.user_service.create_from_profile(profile), True
        except DuplicateUserError as e:
            # A concurrent callback for the same account won the insert
            winner = await self.user_service.find_by_google_id(
                profile.provider_user_id
            )
            if winner:
                logfire.info("Concurrent first login converged", user_id=str(winner.id))
                return await self.user_service.refresh_from_profile(winner, profile), False
            if e.field == "email":
                raise EmailAlreadyLinkedError(profile.email) from e
            raise
