"""Uniform response envelope.

Every JSON response, success or failure, has the shape
`{success, data, error, code}`.
"""

from typing import Any

from fastapi.responses import JSONResponse
from pydantic import BaseModel


class Envelope(BaseModel):
    """Response envelope."""

    success: bool
    data: Any = None
    error: str | None = None
    code: str | None = None


def ok(data: Any = None) -> Envelope:
    """Wrap a successful result. Pydantic views are dumped with camelCase keys."""
    if isinstance(data, BaseModel):
        data = data.model_dump(mode="json", by_alias=True)
    return Envelope(success=True, data=data)


def failure(status_code: int, code: str, message: str) -> JSONResponse:
    """Build an error response."""
    return JSONResponse(
        status_code=status_code,
        content=Envelope(success=False, error=message, code=code).model_dump(),
    )
