from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

from pydantic import ValidationError as PydanticValidationError

from ..exceptions import EnvelopeError
from ..listing.resources import ResourceSpec
from ..models import ListItem, Pagination
from .base import BaseClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchedCollection:
    items: list[ListItem]
    pagination: Pagination | None = None
    statistics: dict[str, Any] = field(default_factory=dict)


@dataclass
class ListingClient(BaseClient):
    def fetch(
        self,
        resource: ResourceSpec,
        params: Mapping[str, Any],
        path_params: Mapping[str, Any] | None = None,
    ) -> FetchedCollection:
        path = resource.resolve(resource.path, path_params or {})
        payload = self._request("GET", path, params=dict(params))
        return parse_collection(resource, payload)

    def mutate(self, method: str, path: str, body: Mapping[str, Any] | None = None) -> dict[str, Any]:
        json_body = dict(body) if body else None
        payload = self._request(method, path, json_body=json_body)
        if payload is None:
            return {}
        if not isinstance(payload, dict):
            return {"data": payload}
        return payload

    def export(self, path: str, params: Mapping[str, Any]) -> bytes:
        return self._download(path, params=dict(params))


def parse_collection(resource: ResourceSpec, payload: Any) -> FetchedCollection:
    if isinstance(payload, list):
        data: Any = payload
        envelope: dict[str, Any] = {}
    elif isinstance(payload, dict):
        envelope = payload
        data = payload.get("data", payload)
    else:
        raise EnvelopeError(
            code="INVALID_ENVELOPE",
            message=f"Unexpected {resource.name} response",
            status_code=200,
            raw_payload=payload,
        )

    if isinstance(data, list):
        rows, block = data, envelope
    elif isinstance(data, dict):
        rows, block = data.get(resource.collection), data
    else:
        rows, block = None, envelope
    if rows is None:
        rows = envelope.get(resource.collection)
    if not isinstance(rows, list):
        raise EnvelopeError(
            code="INVALID_ENVELOPE",
            message=f"Response is missing the {resource.collection!r} collection",
            status_code=200,
            raw_payload=payload,
        )

    try:
        items = [resource.schema.model_validate(row) for row in rows]
        pagination_raw = block.get("pagination")
        pagination = Pagination.model_validate(pagination_raw) if isinstance(pagination_raw, dict) else None
    except PydanticValidationError as exc:
        logger.warning("rejected %s payload: %s", resource.name, exc.error_count())
        raise EnvelopeError(
            code="INVALID_RECORD",
            message=f"Server returned malformed {resource.collection}",
            details={"errors": exc.errors(include_url=False)},
            status_code=200,
        ) from exc

    statistics = block.get("statistics") or block.get("stats") or {}
    return FetchedCollection(
        items=items,
        pagination=pagination,
        statistics=dict(statistics) if isinstance(statistics, dict) else {},
    )
