"""Unit tests for the OAuth login use cases."""

import asyncio
from urllib.parse import parse_qs, urlparse
from uuid import uuid4

import pytest

from arcana.adapter.google.client import GoogleOAuthClient
from arcana.application.usecase.auth import (
    InitiateLoginUseCase,
    LoginError,
    LoginFailureReason,
    LoginUseCase,
)
from arcana.application.usecase.auth.initiate_login import InitiateLoginRequest
from arcana.application.usecase.auth.login import LoginRequest
from arcana.config import AuthSettings
from arcana.domain.model import User
from arcana.domain.repository import UserRepository
from arcana.domain.service import AuthService, JWTService, SessionService, UserService
from arcana.domain.value import AuthProvider, OAuthProfile, UserId
from arcana.persistence.repository.inmemory import InMemoryUserRepository
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


def make_profile(
    sub: str = "google-ada", email: str | None = "ada@example.com"
) -> OAuthProfile:
    return OAuthProfile(
        provider=AuthProvider.GOOGLE,
        provider_user_id=sub,
        display_name="Ada Lovelace",
        email=email,
        avatar_url="https://example.com/ada.jpg",
    )


async def start_login(env, redirect_uri: str | None = None) -> tuple[str, str]:
    """Run the initiate step; return (session cookie, oauth state)."""
    initiate = await env.get(InitiateLoginUseCase)
    response = await initiate.execute(InitiateLoginRequest(redirect_uri=redirect_uri))
    state = parse_qs(urlparse(response.authorization_url).query)["state"][0]
    return response.session_cookie, state


async def register(env, code: str, profile: OAuthProfile) -> None:
    google = await env.get(GoogleOAuthClient)
    google.register(code, profile)


class TestInitiateLogin:
    """Tests for starting the OAuth handshake."""

    @pytest.mark.asyncio
    async def test_session_remembers_state_and_redirect(self, unit_env):
        cookie, state = await start_login(unit_env, "exp://192.168.1.5:19000/--/auth")

        sessions = await unit_env.get(SessionService)
        session = await sessions.load(cookie)

        assert session.data["oauth_state"] == state
        assert session.data["redirect_uri"] == "exp://192.168.1.5:19000/--/auth"

    @pytest.mark.asyncio
    async def test_foreign_redirect_scheme_is_dropped(self, unit_env):
        cookie, _ = await start_login(unit_env, "https://evil.example/steal")

        sessions = await unit_env.get(SessionService)
        session = await sessions.load(cookie)

        assert session.data["redirect_uri"] is None

    @pytest.mark.asyncio
    async def test_each_login_gets_a_fresh_state(self, unit_env):
        _, first = await start_login(unit_env)
        _, second = await start_login(unit_env)

        assert first != second


class TestLogin:
    """Tests for the OAuth callback."""

    @pytest.mark.asyncio
    async def test_first_login_creates_user(self, unit_env):
        # Arrange
        await register(unit_env, "code-ada", make_profile())
        cookie, state = await start_login(unit_env)
        login = await unit_env.get(LoginUseCase)

        # Act
        response = await login.execute(
            LoginRequest(code="code-ada", state=state, session_cookie=cookie)
        )

        # Assert
        assert response.is_new_user is True
        assert response.redirect_uri == "personaarcana://auth"
        assert response.user.email == "ada@example.com"
        assert response.user.onboarding.step == "welcome"

        jwt_service = await unit_env.get(JWTService)
        claims = jwt_service.verify_token(response.token)
        assert claims.user_id == response.user.id

    @pytest.mark.asyncio
    async def test_returning_login_refreshes_without_new_record(self, unit_env):
        await register(unit_env, "code-1", make_profile())
        await register(
            unit_env,
            "code-2",
            make_profile().model_copy(update={"display_name": "Countess Lovelace"}),
        )
        login = await unit_env.get(LoginUseCase)
        users = await unit_env.get(UserRepository)

        cookie, state = await start_login(unit_env)
        first = await login.execute(
            LoginRequest(code="code-1", state=state, session_cookie=cookie)
        )
        cookie, state = await start_login(unit_env)
        second = await login.execute(
            LoginRequest(code="code-2", state=state, session_cookie=cookie)
        )

        assert second.is_new_user is False
        assert second.user.id == first.user.id
        assert second.user.name == "Countess Lovelace"
        assert await users.count() == 1

    @pytest.mark.asyncio
    async def test_client_redirect_uri_is_used(self, unit_env):
        await register(unit_env, "code-ada", make_profile())
        cookie, state = await start_login(unit_env, "personaarcana://auth/done")
        login = await unit_env.get(LoginUseCase)

        response = await login.execute(
            LoginRequest(code="code-ada", state=state, session_cookie=cookie)
        )

        assert response.redirect_uri == "personaarcana://auth/done"

    @pytest.mark.asyncio
    async def test_missing_email_fails_without_creating(self, unit_env):
        await register(unit_env, "code-noemail", make_profile(email=None))
        cookie, state = await start_login(unit_env)
        login = await unit_env.get(LoginUseCase)
        users = await unit_env.get(UserRepository)

        with pytest.raises(LoginError) as exc_info:
            await login.execute(
                LoginRequest(code="code-noemail", state=state, session_cookie=cookie)
            )

        assert exc_info.value.reason == LoginFailureReason.NO_EMAIL
        assert await users.count() == 0

    @pytest.mark.asyncio
    async def test_email_owned_by_other_account_is_a_conflict(self, unit_env):
        """Accounts are never merged on a matching email."""
        users = await unit_env.get(UserRepository)
        await users.create(
            User(
                id=UserId(uuid4()),
                email="ada@example.com",
                name="Ada",
                google_id="some-other-google-account",
            )
        )
        await register(unit_env, "code-ada", make_profile())
        cookie, state = await start_login(unit_env)
        login = await unit_env.get(LoginUseCase)

        with pytest.raises(LoginError) as exc_info:
            await login.execute(
                LoginRequest(code="code-ada", state=state, session_cookie=cookie)
            )

        assert exc_info.value.reason == LoginFailureReason.ACCOUNT_CONFLICT
        assert await users.count() == 1

    @pytest.mark.asyncio
    async def test_state_mismatch_is_rejected(self, unit_env):
        cookie, _ = await start_login(unit_env)
        login = await unit_env.get(LoginUseCase)

        with pytest.raises(LoginError) as exc_info:
            await login.execute(
                LoginRequest(code="code", state="forged", session_cookie=cookie)
            )

        assert exc_info.value.reason == LoginFailureReason.AUTHENTICATION_FAILED

    @pytest.mark.asyncio
    async def test_session_is_single_use(self, unit_env):
        cookie, state = await start_login(unit_env)
        login = await unit_env.get(LoginUseCase)
        await login.execute(LoginRequest(code="code", state=state, session_cookie=cookie))

        with pytest.raises(LoginError) as exc_info:
            await login.execute(
                LoginRequest(code="code", state=state, session_cookie=cookie)
            )

        assert exc_info.value.reason == LoginFailureReason.AUTHENTICATION_FAILED

    @pytest.mark.asyncio
    async def test_provider_error_fails_authentication(self, unit_env):
        cookie, state = await start_login(unit_env)
        login = await unit_env.get(LoginUseCase)

        with pytest.raises(LoginError) as exc_info:
            await login.execute(
                LoginRequest(error="access_denied", state=state, session_cookie=cookie)
            )

        assert exc_info.value.reason == LoginFailureReason.AUTHENTICATION_FAILED

    @pytest.mark.asyncio
    async def test_rejected_grant_fails_authentication(self, unit_env):
        cookie, state = await start_login(unit_env)
        login = await unit_env.get(LoginUseCase)

        with pytest.raises(LoginError) as exc_info:
            await login.execute(
                LoginRequest(code="invalid-code", state=state, session_cookie=cookie)
            )

        assert exc_info.value.reason == LoginFailureReason.AUTHENTICATION_FAILED
        assert exc_info.value.__cause__ is not None

    @pytest.mark.asyncio
    async def test_unexpected_provider_fault_fails_authentication(
        self, unit_env, monkeypatch
    ):
        async def malformed_response(code: str) -> OAuthProfile:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")

        google = await unit_env.get(GoogleOAuthClient)
        monkeypatch.setattr(google, "complete_authorization", malformed_response)
        cookie, state = await start_login(unit_env)
        login = await unit_env.get(LoginUseCase)

        with pytest.raises(LoginError) as exc_info:
            await login.execute(
                LoginRequest(code="code-ada", state=state, session_cookie=cookie)
            )

        assert exc_info.value.reason == LoginFailureReason.AUTHENTICATION_FAILED
        assert exc_info.value.unexpected is True
        assert isinstance(exc_info.value.__cause__, ValueError)


class FailingCreateUserRepository(InMemoryUserRepository):
    """Storage that is down for inserts."""

    async def create(self, user: User) -> User:
        raise RuntimeError("connection refused")


class FailingJWTService(JWTService):
    def create_token(self, user: User, now=None) -> str:
        raise RuntimeError("signing key unavailable")


async def login_with(env, repo=None, jwt_service=None) -> LoginUseCase:
    """Build the login use case around substitute collaborators."""
    return LoginUseCase(
        auth_service=await env.get(AuthService),
        jwt_service=jwt_service or await env.get(JWTService),
        user_service=UserService(repo or await env.get(UserRepository)),
        session_service=await env.get(SessionService),
        auth_settings=await env.get(AuthSettings),
    )


class TestLoginInternalFailures:
    """Tests for failures that are not the user's doing."""

    @pytest.mark.asyncio
    async def test_storage_failure_is_user_creation_failed(self, unit_env):
        await register(unit_env, "code-ada", make_profile())
        login = await login_with(unit_env, repo=FailingCreateUserRepository())
        cookie, state = await start_login(unit_env)

        with pytest.raises(LoginError) as exc_info:
            await login.execute(
                LoginRequest(code="code-ada", state=state, session_cookie=cookie)
            )

        assert exc_info.value.reason == LoginFailureReason.USER_CREATION_FAILED
        assert exc_info.value.unexpected is True
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    @pytest.mark.asyncio
    async def test_signing_failure_is_token_generation_failed(self, unit_env):
        await register(unit_env, "code-ada", make_profile())
        login = await login_with(
            unit_env,
            jwt_service=FailingJWTService(await unit_env.get(AuthSettings)),
        )
        cookie, state = await start_login(unit_env)

        with pytest.raises(LoginError) as exc_info:
            await login.execute(
                LoginRequest(code="code-ada", state=state, session_cookie=cookie)
            )

        assert exc_info.value.reason == LoginFailureReason.TOKEN_GENERATION_FAILED
        assert exc_info.value.unexpected is True
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    @pytest.mark.asyncio
    async def test_user_facing_failures_are_not_unexpected(self, unit_env):
        await register(unit_env, "code-noemail", make_profile(email=None))
        cookie, state = await start_login(unit_env)
        login = await unit_env.get(LoginUseCase)

        with pytest.raises(LoginError) as exc_info:
            await login.execute(
                LoginRequest(code="code-noemail", state=state, session_cookie=cookie)
            )

        assert exc_info.value.unexpected is False


class StaleReadUserRepository(InMemoryUserRepository):
    """Misses the first lookup of each kind, as a racing callback would."""

    def __init__(self) -> None:
        super().__init__()
        self._missed: set[str] = set()

    def _miss_once(self, kind: str) -> bool:
        if kind in self._missed:
            return False
        self._missed.add(kind)
        return True

    async def find_by_google_id(self, google_id: str):
        if self._miss_once("google_id"):
            return None
        return await super().find_by_google_id(google_id)

    async def find_by_email(self, email: str):
        if self._miss_once("email"):
            return None
        return await super().find_by_email(email)


class TestConcurrentFirstLogin:
    """Tests for two callbacks racing to create the same account."""

    @pytest.mark.asyncio
    async def test_concurrent_callbacks_create_one_user(self, unit_env):
        await register(unit_env, "code-ada", make_profile())
        login = await unit_env.get(LoginUseCase)
        users = await unit_env.get(UserRepository)
        first_cookie, first_state = await start_login(unit_env)
        second_cookie, second_state = await start_login(unit_env)

        results = await asyncio.gather(
            login.execute(
                LoginRequest(
                    code="code-ada", state=first_state, session_cookie=first_cookie
                )
            ),
            login.execute(
                LoginRequest(
                    code="code-ada", state=second_state, session_cookie=second_cookie
                )
            ),
        )

        assert await users.count() == 1
        assert results[0].user.id == results[1].user.id

    @pytest.mark.asyncio
    async def test_losing_insert_converges_on_winner(self, unit_env):
        # Arrange: the winner is already stored, but this callback's lookup missed it
        repo = StaleReadUserRepository()
        winner = await repo.create(
            User(
                id=UserId(uuid4()),
                email="ada@example.com",
                name="Ada",
                google_id="google-ada",
            )
        )
        await register(unit_env, "code-ada", make_profile())
        login = LoginUseCase(
            auth_service=await unit_env.get(AuthService),
            jwt_service=await unit_env.get(JWTService),
            user_service=UserService(repo),
            session_service=await unit_env.get(SessionService),
            auth_settings=await unit_env.get(AuthSettings),
        )
        cookie, state = await start_login(unit_env)

        # Act
        response = await login.execute(
            LoginRequest(code="code-ada", state=state, session_cookie=cookie)
        )

        # Assert
        assert response.is_new_user is False
        assert response.user.id == str(winner.id)
        assert response.user.name == "Ada Lovelace"
        assert await repo.count() == 1
