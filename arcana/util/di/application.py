"""Application layer DI providers."""

from dishka import Scope, provide

from arcana.application.usecase.auth import (
    GetCurrentUserUseCase,
    InitiateLoginUseCase,
    LoginUseCase,
    LogoutUseCase,
)
from arcana.application.usecase.user import (
    AdvanceOnboardingUseCase,
    DeleteUserUseCase,
    GetUserProfileUseCase,
    GetUserStatsUseCase,
    UpdatePreferencesUseCase,
    UpdateProfileImageUseCase,
    UpdateUserProfileUseCase,
)
from arcana.config import AuthSettings
from arcana.domain.service import AuthService, JWTService, SessionService, UserService
from arcana.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    # Auth use cases
    @provide(scope=Scope.REQUEST)
    def get_initiate_login_use_case(
        self,
        auth_service: AuthService,
        session_service: SessionService,
        auth_settings: AuthSettings,
    ) -> InitiateLoginUseCase:
        """Provide initiate login use case."""
        return InitiateLoginUseCase(
            auth_service=auth_service,
            session_service=session_service,
            auth_settings=auth_settings,
        )

    @provide(scope=Scope.REQUEST)
    def get_login_use_case(
        self,
        auth_service: AuthService,
        jwt_service: JWTService,
        user_service: UserService,
        session_service: SessionService,
        auth_settings: AuthSettings,
    ) -> LoginUseCase:
        """Provide login use case."""
        return LoginUseCase(
            auth_service=auth_service,
            jwt_service=jwt_service,
            user_service=user_service,
            session_service=session_service,
            auth_settings=auth_settings,
        )

    @provide(scope=Scope.REQUEST)
    def get_current_user_use_case(
        self, jwt_service: JWTService, user_service: UserService
    ) -> GetCurrentUserUseCase:
        """Provide get current user use case."""
        return GetCurrentUserUseCase(jwt_service=jwt_service, user_service=user_service)

    @provide(scope=Scope.REQUEST)
    def get_logout_use_case(self) -> LogoutUseCase:
        """Provide logout use case."""
        return LogoutUseCase()

    # User use cases
    @provide(scope=Scope.REQUEST)
    def get_get_user_profile_use_case(
        self, user_service: UserService
    ) -> GetUserProfileUseCase:
        """Provide get user profile use case."""
        return GetUserProfileUseCase(user_service=user_service)

    @provide(scope=Scope.REQUEST)
    def get_update_user_profile_use_case(
        self, user_service: UserService
    ) -> UpdateUserProfileUseCase:
        """Provide update user profile use case."""
        return UpdateUserProfileUseCase(user_service=user_service)

    @provide(scope=Scope.REQUEST)
    def get_delete_user_use_case(self, user_service: UserService) -> DeleteUserUseCase:
        """Provide delete user use case."""
        return DeleteUserUseCase(user_service=user_service)

    @provide(scope=Scope.REQUEST)
    def get_get_user_stats_use_case(
        self, user_service: UserService
    ) -> GetUserStatsUseCase:
        """Provide get user stats use case."""
        return GetUserStatsUseCase(user_service=user_service)

    @provide(scope=Scope.REQUEST)
    def get_update_preferences_use_case(
        self, user_service: UserService
    ) -> UpdatePreferencesUseCase:
        """Provide update preferences use case."""
        return UpdatePreferencesUseCase(user_service=user_service)

    @provide(scope=Scope.REQUEST)
    def get_update_profile_image_use_case(
        self, user_service: UserService
    ) -> UpdateProfileImageUseCase:
        """Provide update profile image use case."""
        return UpdateProfileImageUseCase(user_service=user_service)

    @provide(scope=Scope.REQUEST)
    def get_advance_onboarding_use_case(
        self, user_service: UserService
    ) -> AdvanceOnboardingUseCase:
        """Provide advance onboarding use case."""
        return AdvanceOnboardingUseCase(user_service=user_service)
