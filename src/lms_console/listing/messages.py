from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Banner:
    level: str
    message: str
    kind: str | None
    expires_at: float | None


class MessageCenter:
    """Holds the one banner a list view shows; dismissible and auto-expiring."""

    def __init__(self, ttl_seconds: float = 5.0, now: Callable[[], float] | None = None) -> None:
        self.ttl_seconds = max(0.0, ttl_seconds)
        self._now = now or time.monotonic
        self._banner: Banner | None = None

    def push(self, level: str, message: str, *, kind: str | None = None, sticky: bool = False) -> Banner:
        expires_at = None if sticky or self.ttl_seconds == 0 else self._now() + self.ttl_seconds
        self._banner = Banner(level=level, message=message, kind=kind, expires_at=expires_at)
        return self._banner

    def error(self, message: str, *, kind: str | None = None, sticky: bool = False) -> Banner:
        return self.push("error", message, kind=kind, sticky=sticky)

    def success(self, message: str) -> Banner:
        return self.push("success", message)

    @property
    def current(self) -> Banner | None:
        banner = self._banner
        if banner and banner.expires_at is not None and banner.expires_at <= self._now():
            self._banner = None
            return None
        return banner

    def dismiss(self) -> None:
        self._banner = None

    def clear_errors(self) -> None:
        if self._banner and self._banner.level == "error":
            self._banner = None

    def render(self) -> dict[str, Any] | None:
        banner = self.current
        if banner is None:
            return None
        return {"level": banner.level, "message": banner.message, "kind": banner.kind}
