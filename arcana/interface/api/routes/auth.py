"""Authentication routes.

Google OAuth handshake for the mobile client. The session cookie only
carries state across the provider redirect; API calls authenticate with
bearer tokens.
"""

import json
import logging
from urllib.parse import urlencode

import logfire
from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import RedirectResponse

from arcana.application.usecase.auth import (
    InitiateLoginUseCase,
    LoginError,
    LoginFailureReason,
    LoginUseCase,
    LogoutUseCase,
)
from arcana.application.usecase.auth.initiate_login import InitiateLoginRequest
from arcana.application.usecase.auth.login import LoginRequest
from arcana.application.usecase.auth.logout import LogoutRequest
from arcana.application.view import UserView
from arcana.config import AuthSettings, Settings
from arcana.domain.model import User
from arcana.domain.service import AuthService, JWTService
from arcana.domain.value import AuthProvider
from arcana.interface.api.envelope import Envelope, ok
from arcana.interface.api.security import require_auth
from arcana.util.observability import report_exception

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"], route_class=DishkaRoute)

ERROR_MESSAGES = {
    LoginFailureReason.AUTHENTICATION_FAILED: "Authentication failed",
    LoginFailureReason.TOKEN_GENERATION_FAILED: "Failed to generate authentication token",
    LoginFailureReason.NO_EMAIL: "No email provided by Google",
    LoginFailureReason.USER_CREATION_FAILED: "Failed to create user account",
    LoginFailureReason.ACCOUNT_CONFLICT: (
        "This email is already linked to a different account"
    ),
}

def _with_query(url: str, params: dict[str, str]) -> str:
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{urlencode(params)}"


def _set_session_cookie(response: Response, value: str, settings: Settings) -> None:
    """Set the session cookie with environment-appropriate flags.

    Production: the OAuth redirect is cross-site, so samesite="none" and
    secure=True are both required. Development runs over plain HTTP.
    """
    auth = settings.auth
    response.set_cookie(
        key=auth.session_cookie_name,
        value=value,
        max_age=auth.session_ttl_seconds,
        httponly=True,
        secure=settings.is_production,
        samesite="none" if settings.is_production else "lax",
        domain=auth.cookie_domain,
        path="/",
    )


def _clear_session_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(
        key=settings.auth.session_cookie_name,
        domain=settings.auth.cookie_domain,
        path="/",
    )


@router.get("/google")
async def google_login(
    initiate_login_use_case: FromDishka[InitiateLoginUseCase],
    settings: FromDishka[Settings],
    redirect_uri: str | None = None,
) -> RedirectResponse:
    """Start Google OAuth.

    Args:
        redirect_uri: Optional client URI (app scheme or Expo dev client) to
            receive the token; anything else falls back to the default scheme

    Returns:
        302 to Google's consent screen, with the session cookie set

    Example:
        GET /auth/google?redirect_uri=exp://192.168.1.5:8081/--/auth
    """
    result = await initiate_login_use_case.execute(
        InitiateLoginRequest(provider=AuthProvider.GOOGLE, redirect_uri=redirect_uri)
    )
    response = RedirectResponse(
        url=result.authorization_url, status_code=status.HTTP_302_FOUND
    )
    _set_session_cookie(response, result.session_cookie, settings)
    return response


@router.get("/google/callback")
async def google_callback(
    request: Request,
    login_use_case: FromDishka[LoginUseCase],
    settings: FromDishka[Settings],
    code: str | None = None,
    state: str | None = None,
    error: str | None = None,
) -> RedirectResponse:
    """Complete Google OAuth and hand the token to the client.

    On success redirects to `<redirect_uri>?token=...&user=<json>`; on any
    failure redirects to `/auth/error?message=<reason>`. Exception details
    never reach the client.
    """
    try:
        result = await login_use_case.execute(
            LoginRequest(
                provider=AuthProvider.GOOGLE,
                code=code,
                state=state,
                error=error,
                session_cookie=request.cookies.get(settings.auth.session_cookie_name),
            )
        )
    except LoginError as e:
        logger.warning("OAuth callback failed: %s (%s)", e.reason.value, e)
        if e.unexpected and e.__cause__ is not None:
            report_exception(e.__cause__, request)
        response = RedirectResponse(
            url=_with_query("/auth/error", {"message": e.reason.value}),
            status_code=status.HTTP_302_FOUND,
        )
        _clear_session_cookie(response, settings)
        return response

    user_json = json.dumps(
        result.user.model_dump(mode="json", by_alias=True), separators=(",", ":")
    )
    response = RedirectResponse(
        url=_with_query(result.redirect_uri, {"token": result.token, "user": user_json}),
        status_code=status.HTTP_302_FOUND,
    )
    _clear_session_cookie(response, settings)
    return response


@router.get("/error")
async def auth_error(
    auth_settings: FromDishka[AuthSettings],
    message: str | None = None,
) -> RedirectResponse:
    """Send a coded login failure back to the mobile client.

    Redirects to `<scheme>://auth?error=<human message>&code=<code>`.
    """
    try:
        reason = LoginFailureReason(message)
    except ValueError:
        reason = LoginFailureReason.AUTHENTICATION_FAILED

    url = _with_query(
        auth_settings.default_mobile_redirect_uri,
        {"error": ERROR_MESSAGES[reason], "code": reason.value},
    )
    return RedirectResponse(url=url, status_code=status.HTTP_302_FOUND)


@router.post("/verify", response_model=Envelope)
async def verify(user: User = Depends(require_auth)) -> Envelope:
    """Confirm a stored token is still good and return the current user."""
    return ok(
        {
            "user": UserView.from_user(user).model_dump(mode="json", by_alias=True),
            "tokenValid": True,
        }
    )


@router.post("/logout", response_model=Envelope)
async def logout(
    logout_use_case: FromDishka[LogoutUseCase],
    user: User = Depends(require_auth),
) -> Envelope:
    """Acknowledge logout. The token is not revoked; the client discards it."""
    result = await logout_use_case.execute(LogoutRequest(user_id=user.id))
    return ok({"message": result.message})


@router.get("/status", response_model=Envelope)
async def auth_status(
    auth_service: FromDishka[AuthService],
    jwt_service: FromDishka[JWTService],
) -> Envelope:
    """Report which auth pieces are configured. Flags only, never secrets."""
    google_configured = auth_service.is_configured(AuthProvider.GOOGLE)
    logfire.debug("Auth status requested", google_configured=google_configured)
    return ok(
        {
            "googleOAuthConfigured": google_configured,
            "jwtConfigured": jwt_service.is_configured,
            "endpoints": {
                "googleAuth": "/auth/google",
                "googleCallback": "/auth/google/callback",
                "verify": "/auth/verify",
                "logout": "/auth/logout",
                "status": "/auth/status",
            },
        }
    )
