"""What a list view does with its collection after a mutation succeeds."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from .controller import ActionResult, ListViewController


class MutationPolicy(Protocol):
    def after_success(self, controller: "ListViewController", result: "ActionResult") -> None: ...


class RefetchAfterMutation:
    """Default: reload the current page from the server, never patch local rows."""

    def after_success(self, controller: "ListViewController", result: "ActionResult") -> None:
        controller.fetch_page()


class NoRefetch:
    """For shells that schedule their own refresh."""

    def after_success(self, controller: "ListViewController", result: "ActionResult") -> None:
        return None
