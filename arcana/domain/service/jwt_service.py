"""JWT token domain service."""

from datetime import datetime

import logfire

from arcana.config import AuthSettings
from arcana.domain.model.user import User
from arcana.util.jwt import JWTError, TokenPayload, create_token, verify_token

from .base import Service


class JWTService(Service):
    """Domain service for bearer token operations.

    Tokens are stateless. Nothing here reads or writes storage, so
    verification can never mutate an identity.
    """

    def __init__(self, auth_settings: AuthSettings) -> None:
        """Initialize JWT service.

        Args:
            auth_settings: Authentication settings
        """
        self.auth_settings = auth_settings

    @property
    def is_configured(self) -> bool:
        return bool(self.auth_settings.jwt_secret)

    def create_token(self, user: User, now: datetime | None = None) -> str:
        """Create a bearer token for the user.

        Args:
            user: Persisted user (its final ID is embedded as `sub`)
            now: Issue instant override

        Returns:
            JWT token string
        """
        with logfire.span("jwt_service.create_token", user_id=str(user.id)):
            token = create_token(
                user_id=str(user.id),
                email=user.email,
                name=user.name,
                settings=self.auth_settings,
                now=now,
            )
            logfire.info("JWT token created", user_id=str(user.id))
            return token

    def verify_token(self, token: str) -> TokenPayload:
        """Verify token and extract payload.

        Raises:
            TokenExpiredError: If the token has expired
            TokenInvalidError: If signature, issuer or audience is wrong
            TokenMalformedError: If the token cannot be parsed
        """
        with logfire.span("jwt_service.verify_token"):
            try:
                payload = verify_token(token, self.auth_settings)
                logfire.debug("JWT token verified", user_id=payload.user_id)
                return payload
            except JWTError as e:
                logfire.info(
                    "JWT token verification failed",
                    error=str(e),
                    error_type=type(e).__name__,
                )
                raise

