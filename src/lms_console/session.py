from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from .auth_store import AuthStore
from .exceptions import AuthError
from .models import SessionData


@dataclass(frozen=True)
class AuthContext:
    """Token and role handed to every controller; never read from storage inside business logic."""

    token: str | None = None
    role: str | None = None
    user_id: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def require(self, roles: Iterable[str] = ()) -> None:
        if not self.token:
            raise AuthError(code="TOKEN_MISSING", message="Please log in to continue", status_code=401)
        allowed = {role.lower() for role in roles}
        if allowed and (self.role or "").lower() not in allowed:
            raise AuthError(
                code="ROLE_FORBIDDEN",
                message="Access denied. Insufficient permissions.",
                details={"role": self.role, "allowed": sorted(allowed)},
                status_code=403,
            )

    def headers(self) -> dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    @classmethod
    def from_session(cls, session: SessionData | None) -> "AuthContext":
        if session is None:
            return cls()
        return cls(token=session.access_token, role=session.role, user_id=session.user_id)


def restore_auth_context(store: AuthStore | None = None) -> AuthContext:
    return AuthContext.from_session((store or AuthStore()).load())


def persist_auth_context(context: AuthContext, store: AuthStore | None = None, *, env_name: str | None = None) -> None:
    if not context.token:
        raise AuthError(code="TOKEN_MISSING", message="Cannot persist a session without a token", status_code=401)
    (store or AuthStore()).save(
        SessionData(access_token=context.token, role=context.role, user_id=context.user_id, env_name=env_name)
    )
