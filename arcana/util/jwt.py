"""JWT token utilities."""

from datetime import datetime, timedelta, timezone

import jwt
from pydantic import BaseModel, ValidationError

from arcana.config import AuthSettings
from arcana.util.error import UtilError


class TokenPayload(BaseModel):
    """JWT token payload.

    `sub` carries the user ID; `email` and `name` are convenience claims
    for the client and are never trusted for authorization.
    """

    sub: str
    email: str
    name: str
    iss: str
    aud: str
    iat: datetime
    exp: datetime

    @property
    def user_id(self) -> str:
        return self.sub


class JWTError(UtilError):
    """JWT-related error."""

    code = "INVALID_TOKEN"


class TokenExpiredError(JWTError):
    """Token signature is valid but the expiry instant has passed."""

    code = "TOKEN_EXPIRED"


class TokenInvalidError(JWTError):
    """Bad signature, or issuer/audience do not match."""

    code = "INVALID_TOKEN"


class TokenMalformedError(JWTError):
    """Token cannot be parsed as a JWT, or its claims are incomplete."""

    code = "INVALID_TOKEN"


def create_token(
    user_id: str,
    email: str,
    name: str,
    settings: AuthSettings,
    now: datetime | None = None,
) -> str:
    """Create a JWT token for the user.

    Args:
        user_id: User ID (becomes the `sub` claim)
        email: User email
        name: User display name
        settings: Authentication settings
        now: Issue instant (defaults to the current UTC time)

    Returns:
        Encoded JWT token
    """
    issued_at = now or datetime.now(timezone.utc)
    expiry = issued_at + timedelta(days=settings.jwt_expiry_days)

    payload = {
        "sub": user_id,
        "email": email,
        "name": name,
        "iss": settings.jwt_issuer,
        "aud": settings.jwt_audience,
        "iat": issued_at,
        "exp": expiry,
    }

    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str, settings: AuthSettings) -> TokenPayload:
    """Verify and decode a JWT token.

    Verification is pure computation: it never touches storage.

    Args:
        token: JWT token to verify
        settings: Authentication settings

    Returns:
        Token payload if valid

    Raises:
        TokenExpiredError: If the token has expired
        TokenInvalidError: If the signature, issuer or audience is wrong
        TokenMalformedError: If the token is structurally unparsable
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            issuer=settings.jwt_issuer,
            options={"require": ["sub", "exp", "iat", "iss", "aud"]},
        )
    except jwt.ExpiredSignatureError:
        raise TokenExpiredError("Token has expired")
    # InvalidSignatureError subclasses DecodeError, so it must come first
    except jwt.InvalidSignatureError:
        raise TokenInvalidError("Invalid token signature")
    except jwt.DecodeError:
        raise TokenMalformedError("Malformed token")
    except jwt.MissingRequiredClaimError as e:
        raise TokenMalformedError(f"Malformed token: {e}")
    except jwt.InvalidTokenError:
        raise TokenInvalidError("Invalid token")

    try:
        return TokenPayload(**payload)
    except ValidationError:
        raise TokenMalformedError("Malformed token claims")
