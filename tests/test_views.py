from __future__ import annotations

import pytest
import responses

from lms_console.listing.controller import ListViewController
from lms_console.listing.resources import RESOURCES, FilterMode
from lms_console.views import open_view

API = "https://api.example.com/api"


def test_catalogue_covers_every_list_screen() -> None:
    assert set(RESOURCES) == {
        "admin_courses",
        "admin_users",
        "admin_enrollments",
        "admin_reviews",
        "instructor_courses",
        "instructor_lessons",
        "instructor_quizzes",
        "instructor_enrollments",
    }
    assert RESOURCES["instructor_quizzes"].mode is FilterMode.LOCAL
    assert RESOURCES["admin_reviews"].mode is FilterMode.SERVER


def test_open_view_unknown_name(http, admin_auth) -> None:
    with pytest.raises(ValueError, match="Unknown resource"):
        open_view("admin_payments", admin_auth, http=http)


@responses.activate
def test_open_view_builds_controller(http, instructor_auth) -> None:
    responses.add(
        responses.GET,
        f"{API}/enrollments/course/course-7",
        json={
            "success": True,
            "data": {
                "enrollments": [
                    {
                        "_id": "e1",
                        "student": {"_id": "s1", "firstName": "Grace", "lastName": "Hopper"},
                        "status": "active",
                        "progress": {"completionPercentage": 40},
                    }
                ],
                "pagination": {"currentPage": 1, "totalPages": 1, "totalEnrollments": 1},
            },
        },
    )
    controller = open_view("instructor_enrollments", instructor_auth, http=http, path_params={"course_id": "course-7"})
    assert isinstance(controller, ListViewController)
    controller.fetch_page()
    enrollment = controller.items[0]
    assert enrollment.student.full_name == "Grace Hopper"
    assert enrollment.progress.completion_percentage == 40
    assert controller.page.total_count == 1
