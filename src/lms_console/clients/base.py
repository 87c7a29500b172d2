from __future__ import annotations

from dataclasses import dataclass

from ..http_client import HttpClient
from ..session import AuthContext


@dataclass
class BaseClient:
    http: HttpClient
    auth: AuthContext

    def _request(self, method: str, path: str, **kwargs):
        headers = kwargs.pop("headers", {})
        merged = {**self.auth.headers(), **headers}
        return self.http.request(method, path, headers=merged, **kwargs)

    def _download(self, path: str, **kwargs) -> bytes:
        headers = kwargs.pop("headers", {})
        merged = {**self.auth.headers(), **headers}
        return self.http.download(path, headers=merged, **kwargs)
