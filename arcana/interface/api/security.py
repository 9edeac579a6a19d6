"""Request authentication and authorization.

Each check is an interceptor: an async callable that inspects the request
(and the user resolved so far) and returns either `Continue` or `Fail`. A
pipeline runs interceptors in order and stops at the first `Fail`, which
becomes an `APIError`. Authentication ("who are you", 401) and ownership
("may you touch this", 403) are separate interceptors.

FastAPI dependencies at the bottom compose the usual pipelines:

    @router.get("/me")
    async def me(user: User = Depends(require_auth)): ...
"""

from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from uuid import UUID

import logfire
from fastapi import Request, status

from arcana.application.usecase.auth import GetCurrentUserUseCase
from arcana.application.usecase.auth.get_current_user import GetCurrentUserRequest
from arcana.domain.error import NotFoundError
from arcana.domain.model import User
from arcana.interface.error import APIError
from arcana.util.jwt import JWTError, TokenExpiredError
from arcana.util.observability import report_exception


@dataclass(frozen=True)
class Continue:
    """Proceed to the next interceptor with this (possibly absent) user."""

    user: User | None = None


@dataclass(frozen=True)
class Fail:
    """Stop the pipeline and answer with this error."""

    status_code: int
    code: str
    message: str


InterceptResult = Continue | Fail
Interceptor = Callable[[Request, User | None], Awaitable[InterceptResult]]


def extract_bearer_token(request: Request) -> str | None:
    """Token from `Authorization: Bearer <token>`, or None."""
    header = request.headers.get("authorization")
    if not header:
        return None
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def _verify(request: Request) -> InterceptResult:
    token = extract_bearer_token(request)
    if token is None:
        return Fail(status.HTTP_401_UNAUTHORIZED, "NO_TOKEN", "Access token required")

    use_case = await request.state.dishka_container.get(GetCurrentUserUseCase)
    try:
        result = await use_case.execute(GetCurrentUserRequest(token=token))
    except TokenExpiredError:
        return Fail(status.HTTP_401_UNAUTHORIZED, "TOKEN_EXPIRED", "Token expired")
    except JWTError:
        return Fail(status.HTTP_401_UNAUTHORIZED, "INVALID_TOKEN", "Invalid token")
    except NotFoundError:
        return Fail(status.HTTP_401_UNAUTHORIZED, "USER_NOT_FOUND", "User not found")
    except Exception as e:
        report_exception(e, request)
        return Fail(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "AUTH_ERROR", "Authentication error"
        )
    return Continue(result.user)


async def authenticate_required(request: Request, user: User | None) -> InterceptResult:
    """Require a valid bearer token for an existing user."""
    return await _verify(request)


async def authenticate_optional(request: Request, user: User | None) -> InterceptResult:
    """Resolve the user if a valid token is present; never fail on a bad one."""
    result = await _verify(request)
    if isinstance(result, Fail):
        logfire.debug("Proceeding anonymously", code=result.code)
        return Continue(None)
    return result


def owns(owner_id: str | UUID) -> Interceptor:
    """Build an ownership check against a known owner ID.

    Must run after `authenticate_required`.
    """

    async def _owns(request: Request, user: User | None) -> InterceptResult:
        if user is None:
            return Fail(
                status.HTTP_401_UNAUTHORIZED, "UNAUTHORIZED", "Authentication required"
            )
        if str(user.id) != str(owner_id):
            logfire.warn(
                "Ownership check failed",
                user_id=str(user.id),
                owner_id=str(owner_id),
                path=request.url.path,
            )
            return Fail(status.HTTP_403_FORBIDDEN, "ACCESS_DENIED", "Access denied")
        return Continue(user)

    return _owns


async def run_pipeline(
    request: Request, interceptors: Sequence[Interceptor]
) -> User | None:
    """Run interceptors in order, short-circuiting on the first failure.

    The resolved user is attached to `request.state.user`.

    Raises:
        APIError: From the first `Fail`
    """
    user: User | None = None
    for interceptor in interceptors:
        result = await interceptor(request, user)
        if isinstance(result, Fail):
            raise APIError(result.status_code, result.code, result.message)
        user = result.user
    request.state.user = user
    return user


def parse_user_id(raw: str) -> UUID:
    """Parse a path user ID.

    Raises:
        APIError: 400 INVALID_ID if not a UUID
    """
    try:
        return UUID(raw)
    except ValueError as e:
        raise APIError(
            status.HTTP_400_BAD_REQUEST, "INVALID_ID", "Invalid user ID format"
        ) from e


# FastAPI dependencies


async def require_auth(request: Request) -> User:
    """Dependency: authenticated user or 401."""
    user = await run_pipeline(request, [authenticate_required])
    if user is None:
        raise APIError(
            status.HTTP_401_UNAUTHORIZED, "UNAUTHORIZED", "Authentication required"
        )
    return user


async def optional_auth(request: Request) -> User | None:
    """Dependency: authenticated user, or None for anonymous callers."""
    return await run_pipeline(request, [authenticate_optional])


async def require_owner(request: Request, user_id: str) -> User:
    """Dependency for `/{user_id}` routes: authenticated and owner, or 401/403.

    A malformed ID is rejected with 400 before any token work.
    """
    owner_id = parse_user_id(user_id)
    user = await run_pipeline(request, [authenticate_required, owns(owner_id)])
    if user is None:
        raise APIError(
            status.HTTP_401_UNAUTHORIZED, "UNAUTHORIZED", "Authentication required"
        )
    return user
