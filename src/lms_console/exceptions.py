from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ApiError(Exception):
    code: str
    message: str
    details: object | None = None
    status_code: int = 0
    raw_payload: object | None = None

    def __str__(self) -> str:
        return f"[{self.status_code}] {self.code}: {self.message}"


class AuthError(ApiError):
    """Missing or expired token, or a role that may not open the view."""


class PermissionError(AuthError):
    """403 from the API."""


class NotFoundError(ApiError):
    pass


class ValidationError(ApiError):
    """400/422 rejected by the API."""


class ConflictError(ApiError):
    pass


class RateLimitError(ApiError):
    pass


class ServerError(ApiError):
    """5xx server-side failures."""


class TransportError(ApiError):
    """Network/transport failure before an HTTP response was returned."""


class EnvelopeError(ApiError):
    """2xx response whose body reported ``success: false`` or was malformed."""
