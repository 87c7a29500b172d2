from __future__ import annotations

from typing import Mapping

from .exceptions import (
    ApiError,
    AuthError,
    ConflictError,
    NotFoundError,
    PermissionError,
    RateLimitError,
    ServerError,
    TransportError,
    ValidationError,
)


def map_error(status_code: int, payload: Mapping[str, object] | None) -> ApiError:
    payload = payload or {}
    code = str(payload.get("code") or "HTTP_ERROR")
    message = str(payload.get("message") or f"HTTP error! status: {status_code}")
    details = payload.get("details") or payload.get("data")
    mapped: type[ApiError]
    if status_code == 401:
        mapped = AuthError
    elif status_code == 403:
        mapped = PermissionError
    elif status_code == 404:
        mapped = NotFoundError
    elif status_code in {400, 422}:
        mapped = ValidationError
    elif status_code == 409:
        mapped = ConflictError
    elif status_code == 429:
        mapped = RateLimitError
    elif status_code >= 500:
        mapped = ServerError
    else:
        mapped = ApiError
    return mapped(
        code=code,
        message=message,
        details=details,
        status_code=status_code,
        raw_payload=dict(payload),
    )


def error_kind(error: Exception) -> str:
    """Bucket an exception into the categories the list views display."""
    if isinstance(error, AuthError):
        return "auth"
    if isinstance(error, TransportError):
        return "network"
    if isinstance(error, ValidationError):
        return "validation"
    if isinstance(error, ApiError):
        return "server"
    return "internal"


def to_user_message(error: Exception) -> str:
    if isinstance(error, TransportError):
        return "Network error. Check your connection and try again."
    if isinstance(error, ApiError):
        return error.message.strip() or "Something went wrong"
    return str(error) or "Something went wrong"
