"""Exception handlers.

Every failure leaves the API as an envelope. Anything not mapped here is
reported to Logfire with request context and becomes 500 INTERNAL_ERROR.
"""

import logging

import pydantic
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from arcana.config import Settings
from arcana.domain.error import DuplicateUserError, NotFoundError, ValidationError
from arcana.interface.api.envelope import failure
from arcana.interface.error import APIError
from arcana.util.observability import report_exception

logger = logging.getLogger(__name__)

_HTTP_CODES = {
    status.HTTP_401_UNAUTHORIZED: "UNAUTHORIZED",
    status.HTTP_403_FORBIDDEN: "ACCESS_DENIED",
    status.HTTP_404_NOT_FOUND: "NOT_FOUND",
    status.HTTP_405_METHOD_NOT_ALLOWED: "METHOD_NOT_ALLOWED",
}


def _describe_errors(errors) -> str:
    """Join pydantic error details into one line, e.g. `body.name: too short`."""
    parts = []
    for detail in errors:
        location = ".".join(str(part) for part in detail.get("loc", ()))
        parts.append(f"{location}: {detail['msg']}" if location else detail["msg"])
    return "; ".join(parts) or "Validation failed"


def register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    """Register envelope-producing handlers on the app."""

    @app.exception_handler(APIError)
    async def handle_api_error(request: Request, exc: APIError):
        return failure(exc.status_code, exc.code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        return failure(
            status.HTTP_400_BAD_REQUEST,
            "VALIDATION_ERROR",
            _describe_errors(exc.errors()),
        )

    @app.exception_handler(pydantic.ValidationError)
    async def handle_model_validation(request: Request, exc: pydantic.ValidationError):
        return failure(
            status.HTTP_400_BAD_REQUEST,
            "VALIDATION_ERROR",
            _describe_errors(exc.errors()),
        )

    @app.exception_handler(ValidationError)
    async def handle_domain_validation(request: Request, exc: ValidationError):
        return failure(status.HTTP_400_BAD_REQUEST, "VALIDATION_ERROR", str(exc))

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        code = "USER_NOT_FOUND" if exc.resource == "User" else "NOT_FOUND"
        return failure(status.HTTP_404_NOT_FOUND, code, f"{exc.resource} not found")

    @app.exception_handler(DuplicateUserError)
    async def handle_duplicate_user(request: Request, exc: DuplicateUserError):
        return failure(status.HTTP_409_CONFLICT, "USER_EXISTS", str(exc))

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            return failure(exc.status_code, "NOT_FOUND", "Route not found")
        code = _HTTP_CODES.get(exc.status_code, "HTTP_ERROR")
        return failure(exc.status_code, code, str(exc.detail))

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        report_exception(exc, request)
        logger.error(
            "Unhandled %s on %s %s", type(exc).__name__, request.method, request.url.path
        )
        message = "Internal server error" if settings.is_production else str(exc)
        return failure(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR", message
        )
