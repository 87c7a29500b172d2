from __future__ import annotations

from lms_console.listing.controller import ListViewController
from lms_console.listing.messages import MessageCenter
from lms_console.listing.resources import ADMIN_COURSES


def test_banner_expires_after_ttl(clock) -> None:
    center = MessageCenter(ttl_seconds=5, now=clock)
    center.success("Course published")
    clock.advance(4.9)
    assert center.render() == {"level": "success", "message": "Course published", "kind": None}
    clock.advance(0.2)
    assert center.render() is None


def test_sticky_banner_stays_until_dismissed(clock) -> None:
    center = MessageCenter(ttl_seconds=5, now=clock)
    center.error("Please log in to continue", kind="auth", sticky=True)
    clock.advance(60)
    assert center.current is not None
    center.dismiss()
    assert center.current is None


def test_new_banner_replaces_old_and_clear_errors_keeps_success(clock) -> None:
    center = MessageCenter(ttl_seconds=5, now=clock)
    center.error("Boom", kind="server")
    center.success("Saved")
    center.clear_errors()
    assert center.current.message == "Saved"
    center.error("Boom again")
    center.clear_errors()
    assert center.current is None


def test_controller_banner_uses_injected_clock(http, admin_auth, clock) -> None:
    controller = ListViewController(ADMIN_COURSES, http, admin_auth, clock=clock)
    controller.perform_bulk_action([], "delete")
    assert controller.render()["message"]["message"] == "Please select items first"
    clock.advance(5)
    assert controller.render()["message"] is None
