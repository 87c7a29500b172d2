"""One controller behind every admin and instructor list screen.

The controller owns a :class:`FilterState`, asks the API for data, narrows it
locally when the view works on a fully fetched collection, and exposes row,
bulk and create actions that mutate on the server and then reload.

Every fetch takes a ticket from a monotonically increasing sequence. Only the
response holding the newest ticket is committed; anything older is dropped, so
rapid filter changes can never leave an outdated page on screen. ``close()``
advances the sequence as well, which cancels whatever is still in flight.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum
from itertools import count
from pathlib import Path
from typing import Any

from ..clients.listing_client import FetchedCollection, ListingClient
from ..error_mapper import error_kind, to_user_message
from ..exceptions import ApiError, AuthError
from ..export import ExportResult, export_rows, save_export
from ..http_client import HttpClient
from ..logger import get_logger, log_action
from ..models import ListItem, SortOrder
from ..session import AuthContext
from ..validation import ClientValidationError, PayloadValidator
from .derivation import apply_local_derivation
from .filter_state import (
    FilterState,
    build_query,
    default_filter_state,
    goto_page,
    set_filter,
    set_sort,
)
from .messages import MessageCenter
from .mutation_policy import MutationPolicy, RefetchAfterMutation
from .pagination import PageResult, clamp_page, paginate, total_pages
from .resources import FilterMode, ResourceSpec

logger = logging.getLogger(__name__)

NOTHING_SELECTED = "Please select items first"


class ViewStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"
    CLOSED = "closed"


@dataclass(frozen=True)
class ActionResult:
    success: bool
    message: str | None = None
    data: dict[str, Any] = field(default_factory=dict)
    field_errors: dict[str, str] = field(default_factory=dict)
    error_kind: str | None = None
    artifact: ExportResult | None = None


class ListViewController:
    def __init__(
        self,
        resource: ResourceSpec,
        http: HttpClient,
        auth: AuthContext,
        *,
        page_size: int | None = None,
        path_params: Mapping[str, Any] | None = None,
        mutation_policy: MutationPolicy | None = None,
        message_ttl_seconds: float | None = None,
        clock: Callable[[], float] | None = None,
        auto_fetch: bool = True,
        export_dir: str | Path | None = None,
        action_logger: logging.Logger | None = None,
    ) -> None:
        self.resource = resource
        self.auth = auth
        self.client = ListingClient(http=http, auth=auth)
        self.path_params = dict(path_params or {})
        # fail fast on a view opened without its course id
        resource.resolve(resource.path, self.path_params)

        self.page_size = page_size or http.config.page_size
        self.state = default_filter_state(resource, self.page_size)
        self.mutation_policy = mutation_policy or RefetchAfterMutation()
        ttl = http.config.message_ttl_seconds if message_ttl_seconds is None else message_ttl_seconds
        self.messages = MessageCenter(ttl_seconds=ttl, now=clock)
        self.auto_fetch = auto_fetch
        self.export_dir = Path(export_dir or http.config.export_dir)
        self.action_logger = action_logger or get_logger()

        self.status = ViewStatus.IDLE
        self.items: list[ListItem] = []
        self.page: PageResult[ListItem] = paginate([], 1, self.page_size)
        self.statistics: dict[str, Any] = {}
        self.error: str | None = None
        self.error_kind: str | None = None

        self._all_items: list[ListItem] = []
        self._derived: list[ListItem] = []
        self._selected: dict[str, None] = {}
        self._tickets = count(1)
        self._latest_ticket = 0
        self._closed = False
        self._lock = threading.RLock()

    # -- filter / sort / page ------------------------------------------------

    def set_filter(self, field_name: str, value: str) -> None:
        with self._lock:
            set_filter(self.state, field_name, value)
        self._refresh_after_state_change()

    def set_sort(self, field_name: str, direction: SortOrder | str = SortOrder.ASC) -> None:
        with self._lock:
            set_sort(self.state, field_name, direction)
        self._refresh_after_state_change()

    def set_page(self, page: int) -> None:
        with self._lock:
            goto_page(self.state, page)
        self._refresh_after_state_change()

    def next_page(self) -> None:
        if self.page.has_next_page:
            self.set_page(self.state.page + 1)

    def prev_page(self) -> None:
        if self.state.page > 1:
            self.set_page(self.state.page - 1)

    def set_page_size(self, page_size: int) -> None:
        if page_size <= 0:
            raise ValueError(f"page_size must be > 0, got {page_size}")
        with self._lock:
            self.page_size = page_size
            self.state.page_size = page_size
            self.state.page = 1
        self._refresh_after_state_change()

    def reset_filters(self) -> None:
        with self._lock:
            self.state = default_filter_state(self.resource, self.page_size)
        self._refresh_after_state_change()

    def _refresh_after_state_change(self) -> None:
        if not self.auto_fetch or self._closed:
            return
        if self.resource.mode is FilterMode.LOCAL and self.status is ViewStatus.READY:
            with self._lock:
                self._derive()
            return
        self.fetch_page()

    # -- fetching ------------------------------------------------------------

    def fetch_page(self) -> PageResult[ListItem] | None:
        return self._fetch(allow_clamp_retry=True)

    def refresh(self) -> PageResult[ListItem] | None:
        return self.fetch_page()

    def _fetch(self, *, allow_clamp_retry: bool) -> PageResult[ListItem] | None:
        with self._lock:
            if self._closed:
                logger.debug("%s: fetch ignored, view closed", self.resource.name)
                return None
            try:
                self.auth.require(self.resource.roles)
            except AuthError as exc:
                self._fail(exc)
                return None
            ticket = next(self._tickets)
            self._latest_ticket = ticket
            snapshot = replace(self.state, category_filters=dict(self.state.category_filters))
            self.status = ViewStatus.LOADING

        params = self._query_for(snapshot)
        try:
            fetched = self.client.fetch(self.resource, params, self.path_params)
        except ApiError as exc:
            with self._lock:
                if self._is_stale(ticket):
                    logger.debug("%s: dropped failed response for ticket %s", self.resource.name, ticket)
                    return None
                self._fail(exc)
            return None

        with self._lock:
            if self._is_stale(ticket):
                logger.debug("%s: dropped stale response for ticket %s", self.resource.name, ticket)
                return None
            if self.resource.mode is FilterMode.LOCAL:
                self._all_items = list(fetched.items)
                self.statistics = fetched.statistics
                page = self._derive()
            else:
                page = self._commit_server_page(fetched, snapshot)
            self.status = ViewStatus.READY
            self.error = None
            self.error_kind = None
            self.messages.clear_errors()
            needs_clamp = (
                allow_clamp_retry
                and self.resource.mode is FilterMode.SERVER
                and not page.items
                and page.total_count > 0
                and snapshot.page > page.total_pages
            )
        if needs_clamp:
            logger.info("%s: page %s out of range, reloading page %s", self.resource.name, snapshot.page, page.current_page)
            return self._fetch(allow_clamp_retry=False) or page
        return page

    def _query_for(self, snapshot: FilterState) -> dict[str, Any]:
        if self.resource.mode is FilterMode.LOCAL:
            return {"limit": self.resource.local_fetch_limit}
        return build_query(snapshot, search_param=self.resource.search_param)

    def _commit_server_page(self, fetched: FetchedCollection, snapshot: FilterState) -> PageResult[ListItem]:
        pagination = fetched.pagination
        total = pagination.resolved_total() if pagination else None
        if total is None:
            if pagination and pagination.total_pages:
                total = pagination.total_pages * snapshot.page_size
            else:
                total = len(fetched.items)
        pages = total_pages(total, snapshot.page_size)
        requested = pagination.current_page if pagination and pagination.current_page else snapshot.page
        current = clamp_page(requested, pages)
        self.state.page = current
        self.items = list(fetched.items)
        self.statistics = fetched.statistics
        self.page = PageResult(
            items=self.items,
            total_count=total,
            current_page=current,
            total_pages=pages,
            page_size=snapshot.page_size,
            statistics=fetched.statistics,
        )
        return self.page

    def _derive(self) -> PageResult[ListItem]:
        self._derived = apply_local_derivation(self._all_items, self.state, self.resource.searchable_fields)
        self.page = paginate(self._derived, self.state.page, self.state.page_size, self.statistics)
        self.state.page = self.page.current_page
        self.items = self.page.items
        return self.page

    def _is_stale(self, ticket: int) -> bool:
        return self._closed or ticket != self._latest_ticket

    def _fail(self, exc: Exception) -> None:
        self.status = ViewStatus.ERROR
        self.error = to_user_message(exc)
        self.error_kind = error_kind(exc)
        self.messages.error(self.error, kind=self.error_kind, sticky=self.error_kind == "auth")
        logger.warning("%s: fetch failed (%s): %s", self.resource.name, self.error_kind, self.error)

    # -- selection -----------------------------------------------------------

    @property
    def selected_ids(self) -> list[str]:
        return list(self._selected)

    def toggle_selection(self, item_id: Any) -> None:
        key = str(item_id)
        with self._lock:
            if key in self._selected:
                del self._selected[key]
            else:
                self._selected[key] = None

    def select_all(self) -> None:
        with self._lock:
            current = [str(item.id) for item in self.items]
            if current and all(key in self._selected for key in current):
                for key in current:
                    self._selected.pop(key, None)
            else:
                self._selected.update(dict.fromkeys(current))

    def clear_selection(self) -> None:
        with self._lock:
            self._selected.clear()

    # -- mutations -----------------------------------------------------------

    def perform_row_action(self, item_id: Any, action: str, payload: Mapping[str, Any] | None = None) -> ActionResult:
        spec = self.resource.action(action)
        body = dict(payload or {})
        blocked = self._check_mutation(spec.validator, body)
        if blocked:
            return blocked
        path = self.resource.resolve(spec.path, self.path_params, id=item_id)
        return self._mutate(spec.method, path, body, action=action, target=str(item_id))

    def perform_bulk_action(
        self,
        item_ids: Iterable[Any],
        action: str,
        payload: Mapping[str, Any] | None = None,
    ) -> ActionResult:
        ids = [str(item_id) for item_id in item_ids]
        if not ids:
            self.messages.error(NOTHING_SELECTED, kind="validation")
            return ActionResult(success=False, message=NOTHING_SELECTED, error_kind="validation")
        bulk = self.resource.bulk
        if bulk is None:
            raise ValueError(f"{self.resource.name} does not support bulk actions")
        blocked = self._check_mutation(None, {})
        if blocked:
            return blocked
        body = {bulk.ids_key: ids, "action": action, "actionData": dict(payload or {})}
        path = self.resource.resolve(bulk.path, self.path_params)
        return self._mutate(
            bulk.method,
            path,
            body,
            action=f"bulk.{action}",
            target=",".join(ids),
            on_success=self.clear_selection,
        )

    def create_item(self, payload: Mapping[str, Any]) -> ActionResult:
        spec = self.resource.create
        if spec is None:
            raise ValueError(f"{self.resource.name} does not support creating items")
        body = dict(payload)
        blocked = self._check_mutation(spec.validator, body)
        if blocked:
            return blocked
        path = self.resource.resolve(spec.path, self.path_params)
        return self._mutate(spec.method, path, body, action="create", target=None)

    def _check_mutation(self, validator: PayloadValidator | None, body: dict[str, Any]) -> ActionResult | None:
        if self._closed:
            return ActionResult(success=False, message="View is closed", error_kind="internal")
        try:
            self.auth.require(self.resource.roles)
        except AuthError as exc:
            message = to_user_message(exc)
            self.messages.error(message, kind="auth", sticky=True)
            return ActionResult(success=False, message=message, error_kind="auth")
        if validator is None:
            return None
        try:
            validator(body)
        except ClientValidationError as exc:
            return ActionResult(
                success=False,
                message=str(exc),
                field_errors=exc.by_field(),
                error_kind="validation",
            )
        return None

    def _mutate(
        self,
        method: str,
        path: str,
        body: dict[str, Any],
        *,
        action: str,
        target: str | None,
        on_success: Callable[[], None] | None = None,
    ) -> ActionResult:
        try:
            response = self.client.mutate(method, path, body)
        except ApiError as exc:
            message = to_user_message(exc)
            kind = error_kind(exc)
            self.messages.error(message, kind=kind)
            log_action(self.action_logger, self.resource.name, action, self.auth.role, "error", target=target, detail=kind)
            return ActionResult(success=False, message=message, error_kind=kind, data={"status_code": exc.status_code})

        message = str(response.get("message") or "Action completed successfully")
        result = ActionResult(success=True, message=message, data=response)
        self.messages.success(message)
        log_action(self.action_logger, self.resource.name, action, self.auth.role, "success", target=target)
        if on_success:
            on_success()
        self.mutation_policy.after_success(self, result)
        return result

    # -- export --------------------------------------------------------------

    def export(self, output_dir: str | Path | None = None, *, today: date | None = None) -> ActionResult:
        blocked = self._check_mutation(None, {})
        if blocked:
            return blocked
        destination = Path(output_dir) if output_dir else self.export_dir
        name = self.resource.collection
        try:
            if self.resource.export_path:
                path = self.resource.resolve(self.resource.export_path, self.path_params)
                params = build_query(self.state, search_param=self.resource.search_param, paged=False)
                artifact = save_export(name, self.client.export(path, params), destination, today=today)
            else:
                rows = self._derived if self.resource.mode is FilterMode.LOCAL else self.items
                artifact = export_rows(name, rows, self._export_columns(), destination, today=today)
        except ApiError as exc:
            message = "Export failed: " + to_user_message(exc)
            kind = error_kind(exc)
            self.messages.error(message, kind=kind)
            log_action(self.action_logger, self.resource.name, "export", self.auth.role, "error", detail=kind)
            return ActionResult(success=False, message=message, error_kind=kind)
        except OSError as exc:
            message = f"Export failed: could not write file ({exc.strerror or exc})"
            self.messages.error(message, kind="internal")
            log_action(self.action_logger, self.resource.name, "export", self.auth.role, "error", detail="io")
            return ActionResult(success=False, message=message, error_kind="internal")

        message = "Export completed successfully"
        self.messages.success(message)
        log_action(self.action_logger, self.resource.name, "export", self.auth.role, "success", target=str(artifact.path))
        return ActionResult(success=True, message=message, data={"path": str(artifact.path)}, artifact=artifact)

    def _export_columns(self) -> list[str]:
        resource = self.resource
        return list(dict.fromkeys(("id", *resource.searchable_fields, *resource.category_filters, *resource.sortable_fields)))

    # -- lifecycle / rendering -----------------------------------------------

    def close(self) -> None:
        with self._lock:
            self._closed = True
            self._latest_ticket = next(self._tickets)
            self.status = ViewStatus.CLOSED
            self._selected.clear()

    def dismiss_message(self) -> None:
        self.messages.dismiss()

    def render(self) -> dict[str, Any]:
        blocked = self.error_kind == "auth"
        return {
            "resource": self.resource.name,
            "status": self.status.value,
            "loading": self.status is ViewStatus.LOADING,
            "blocked": blocked,
            "error": self.error,
            "message": self.messages.render(),
            "items": [] if blocked else [item.model_dump(by_alias=True) for item in self.items],
            "pagination": self.page.render(),
            "filters": {
                "search": self.state.search_term,
                **self.state.category_filters,
            },
            "sort": {"field": self.state.sort_field, "direction": self.state.sort_direction.value},
            "selected_ids": self.selected_ids,
            "statistics": self.statistics,
        }
