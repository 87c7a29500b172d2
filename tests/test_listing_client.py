from __future__ import annotations

import pytest
import responses
from responses import matchers

from lms_console.clients.listing_client import ListingClient, parse_collection
from lms_console.exceptions import EnvelopeError
from lms_console.listing.resources import ADMIN_USERS, INSTRUCTOR_LESSONS, INSTRUCTOR_QUIZZES
from lms_console.models import Lesson, User

API = "https://api.example.com/api"


def test_parse_collection_with_pagination_and_custom_total_key() -> None:
    payload = {
        "success": True,
        "data": {
            "users": [{"_id": "u1", "firstName": "Ada", "lastName": "Lovelace", "email": "ada@example.com"}],
            "pagination": {"currentPage": 2, "totalPages": 3, "totalUsers": 45, "hasNextPage": True},
            "statistics": {"totalUsers": 45, "activeUsers": 40},
        },
    }
    fetched = parse_collection(ADMIN_USERS, payload)
    assert isinstance(fetched.items[0], User)
    assert fetched.items[0].first_name == "Ada"
    assert fetched.pagination.current_page == 2
    assert fetched.pagination.resolved_total() == 45
    assert fetched.statistics == {"totalUsers": 45, "activeUsers": 40}


def test_parse_collection_accepts_bare_list_data() -> None:
    fetched = parse_collection(INSTRUCTOR_LESSONS, {"success": True, "data": [{"_id": "l1", "title": "Intro", "order": 1}]})
    assert isinstance(fetched.items[0], Lesson)
    assert fetched.pagination is None


def test_parse_collection_accepts_top_level_collection() -> None:
    fetched = parse_collection(INSTRUCTOR_QUIZZES, {"success": True, "quizzes": [{"_id": "q1", "title": "Final"}]})
    assert fetched.items[0].id == "q1"


def test_parse_collection_rejects_missing_collection() -> None:
    with pytest.raises(EnvelopeError) as exc_info:
        parse_collection(ADMIN_USERS, {"success": True, "data": {"people": []}})
    assert exc_info.value.code == "INVALID_ENVELOPE"


def test_parse_collection_rejects_records_without_id() -> None:
    with pytest.raises(EnvelopeError) as exc_info:
        parse_collection(ADMIN_USERS, {"success": True, "data": {"users": [{"firstName": "NoId"}]}})
    assert exc_info.value.code == "INVALID_RECORD"


@responses.activate
def test_fetch_resolves_path_and_sends_token(http, instructor_auth) -> None:
    responses.add(
        responses.GET,
        f"{API}/lessons/course/course-9",
        json={"success": True, "data": [{"_id": "l1", "title": "Intro", "order": 1}]},
        match=[
            matchers.header_matcher({"Authorization": "Bearer instructor-token"}),
            matchers.query_param_matcher({"limit": "1000"}),
        ],
    )
    client = ListingClient(http=http, auth=instructor_auth)
    fetched = client.fetch(INSTRUCTOR_LESSONS, {"limit": 1000}, {"course_id": "course-9"})
    assert [lesson.id for lesson in fetched.items] == ["l1"]


@responses.activate
def test_mutate_normalizes_empty_and_list_bodies(http, admin_auth) -> None:
    responses.add(responses.DELETE, f"{API}/users/u1", body="", status=204)
    responses.add(responses.PUT, f"{API}/users/u2/status", json=[{"ok": True}])
    client = ListingClient(http=http, auth=admin_auth)
    assert client.mutate("DELETE", "/users/u1") == {}
    assert client.mutate("PUT", "/users/u2/status", {"isActive": False}) == {"data": [{"ok": True}]}
