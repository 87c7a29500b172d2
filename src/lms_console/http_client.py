from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from typing import Any
from urllib.parse import urljoin

import requests

from .config import ClientConfig
from .error_mapper import map_error
from .exceptions import EnvelopeError, TransportError

logger = logging.getLogger(__name__)


@dataclass
class LastOperation:
    method: str
    path: str
    duration_ms: int
    result: str


@dataclass
class HttpClient:
    config: ClientConfig
    session: requests.Session | None = None
    last_operation: LastOperation | None = None

    def __post_init__(self) -> None:
        if self.session is None:
            self.session = requests.Session()

    def _build_url(self, path: str) -> str:
        base = self.config.api_base_url.rstrip("/") + "/"
        return urljoin(base, path.lstrip("/"))

    def request(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        json_body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any] | list[Any] | None:
        response = self._send(method, path, headers=headers, json_body=json_body, params=params, accept="application/json")
        if not response.content:
            return None
        try:
            parsed = response.json()
        except json.JSONDecodeError as exc:
            raise EnvelopeError(
                code="INVALID_JSON",
                message="Server returned an unreadable response",
                status_code=response.status_code,
            ) from exc
        if isinstance(parsed, dict) and parsed.get("success") is False:
            raise EnvelopeError(
                code=str(parsed.get("code") or "REQUEST_FAILED"),
                message=str(parsed.get("message") or "Request failed"),
                details=parsed.get("data"),
                status_code=response.status_code,
                raw_payload=parsed,
            )
        return parsed

    def download(
        self,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        params: dict[str, Any] | None = None,
    ) -> bytes:
        return self._send("GET", path, headers=headers, params=params, accept="*/*").content

    def _send(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None,
        json_body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        accept: str,
    ) -> requests.Response:
        if self.session is None:
            raise RuntimeError("HTTP session not initialized")
        request_headers = {"Accept": accept}
        if json_body is not None:
            request_headers["Content-Type"] = "application/json"
        if headers:
            request_headers.update(headers)

        normalized_method = method.upper()
        url = self._build_url(path)
        can_retry = normalized_method in {"GET", "HEAD"}
        attempts = self.config.retries + 1 if can_retry else 1

        started = time.monotonic()
        response: requests.Response | None = None
        for attempt in range(attempts):
            try:
                response = self.session.request(
                    method=normalized_method,
                    url=url,
                    headers=request_headers,
                    json=json_body,
                    params=params,
                    timeout=(self.config.connect_timeout_seconds, self.config.read_timeout_seconds),
                    verify=self.config.verify_ssl,
                )
            except requests.RequestException as exc:
                if attempt >= attempts - 1:
                    self._record(normalized_method, path, started, "transport_error")
                    raise TransportError(
                        code="TRANSPORT_ERROR",
                        message=str(exc),
                        details={"type": type(exc).__name__},
                        status_code=0,
                    ) from exc
                logger.warning("%s %s failed (%s), retrying", normalized_method, path, type(exc).__name__)
            else:
                if response.status_code < 500 or attempt >= attempts - 1:
                    break
                logger.warning("%s %s returned %s, retrying", normalized_method, path, response.status_code)
            time.sleep(self.config.retry_backoff_seconds * (2**attempt))

        if response is None:
            raise RuntimeError("HTTP request failed without response")

        if response.ok:
            self._record(normalized_method, path, started, "success")
            return response

        payload: Any
        try:
            payload = response.json()
        except ValueError:
            payload = {"message": response.text}
        self._record(normalized_method, path, started, "error")
        raise map_error(response.status_code, payload if isinstance(payload, dict) else None)

    def _record(self, method: str, path: str, started: float, result: str) -> None:
        self.last_operation = LastOperation(
            method=method,
            path=path,
            duration_ms=int((time.monotonic() - started) * 1000),
            result=result,
        )
        logger.debug("%s %s -> %s in %sms", method, path, result, self.last_operation.duration_ms)
