"""Observability configuration using Logfire.

Logfire is both the tracing backend and the error-tracking collaborator:
unexpected exceptions are reported through `report_exception`, which
attaches request context and strips credentials.

Usage:
    import logfire

    logfire.info("User created", user_id=str(user.id))

    with logfire.span("oauth_callback", provider="google"):
        ...
"""

import logfire
from fastapi import FastAPI, Request
from sqlalchemy.ext.asyncio import AsyncEngine

from arcana.config import API_VERSION, Settings

_SENSITIVE_HEADERS = {"authorization", "cookie", "set-cookie"}


def configure_logfire(settings: Settings) -> None:
    """Configure Logfire for observability.

    - Development: local console only unless a token is provided
    - Production: sends to Logfire cloud when LOGFIRE_TOKEN is set

    Args:
        settings: Application settings
    """
    observability = settings.observability

    # Priority: explicit setting > token presence > default (False)
    if observability.send_to_logfire is not None:
        send_to_logfire = observability.send_to_logfire
    else:
        send_to_logfire = bool(observability.logfire_token)

    config_kwargs = {
        "service_name": "persona-arcana-api",
        "service_version": API_VERSION,
        "environment": settings.environment,
        "send_to_logfire": send_to_logfire,
        "console": logfire.ConsoleOptions(
            colors="auto",
            span_style="show-parents",
            include_timestamps=True,
            verbose=settings.debug,
        ),
    }

    if observability.logfire_token:
        config_kwargs["token"] = observability.logfire_token

    logfire.configure(**config_kwargs)

    logfire.info(
        "Observability configured",
        environment=settings.environment,
        debug=settings.debug,
        send_to_logfire=send_to_logfire,
        has_token=bool(observability.logfire_token),
    )


def scrub_headers(headers: dict[str, str]) -> dict[str, str]:
    """Drop credentials from a header mapping before it is reported."""
    return {k: v for k, v in headers.items() if k.lower() not in _SENSITIVE_HEADERS}


def report_exception(exc: BaseException, request: Request) -> None:
    """Report an unexpected exception with request context.

    Args:
        exc: The exception being reported
        request: Request during which it was raised
    """
    user = getattr(request.state, "user", None)
    logfire.exception(
        "Unhandled exception: {error_type}",
        error_type=type(exc).__name__,
        method=request.method,
        path=request.url.path,
        query=dict(request.query_params),
        headers=scrub_headers(dict(request.headers)),
        user_id=str(user.id) if user else None,
        _exc_info=exc,
    )


def instrument_fastapi(app: FastAPI) -> None:
    """Instrument FastAPI application with Logfire.

    Args:
        app: FastAPI application instance
    """

    def _map_request_attributes(request, attributes):
        result = {**attributes}
        if hasattr(request, "method"):
            result["method"] = request.method
        if hasattr(request, "url"):
            result["path"] = request.url.path
        if hasattr(request, "client") and request.client:
            result["client_host"] = request.client.host
        return result

    logfire.instrument_fastapi(
        app,
        # Headers carry bearer tokens and session cookies
        capture_headers=False,
        request_attributes_mapper=_map_request_attributes,
    )
    logfire.info("FastAPI instrumented")


def instrument_sqlalchemy(engine: AsyncEngine) -> None:
    """Instrument SQLAlchemy engine with Logfire.

    Args:
        engine: SQLAlchemy async engine
    """
    logfire.instrument_sqlalchemy(engine=engine.sync_engine)
    logfire.info("SQLAlchemy instrumented")


def instrument_httpx() -> None:
    """Instrument outbound httpx calls (Google token and userinfo endpoints)."""
    logfire.instrument_httpx()
    logfire.info("httpx instrumented")
