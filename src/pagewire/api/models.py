from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class ApiError(BaseModel):
    code: str
    message: str
    details: Any | None = None


class ErrorEnvelope(BaseModel):
    """Body of framework-level failures, which never use ActionResponse."""

    error: ApiError


def fail(*, code: str, message: str, details: Any | None = None) -> ErrorEnvelope:
    return ErrorEnvelope(error=ApiError(code=code, message=message, details=details))
