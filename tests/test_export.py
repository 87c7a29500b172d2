from __future__ import annotations

import csv
from datetime import date

import responses
from responses import matchers

from lms_console.export import export_filename, export_rows, save_export
from lms_console.listing.controller import ListViewController
from lms_console.listing.resources import ADMIN_ENROLLMENTS, INSTRUCTOR_QUIZZES

API = "https://api.example.com/api"
TODAY = date(2024, 5, 17)


def test_export_filename() -> None:
    assert export_filename("enrollments", TODAY) == "enrollments-export-2024-05-17.csv"


def test_save_export_writes_bytes(tmp_path) -> None:
    result = save_export("enrollments", b"a,b\n1,2\n", tmp_path / "out", today=TODAY)
    assert result.path.read_bytes() == b"a,b\n1,2\n"
    assert result.size_bytes == 8
    assert result.source == "server"


def test_export_rows_blanks_sensitive_columns(tmp_path) -> None:
    rows = [{"id": 1, "title": "Quiz", "isPublished": True, "resetToken": "abc"}]
    result = export_rows("quizzes", rows, ["id", "title", "isPublished", "resetToken"], tmp_path, today=TODAY)
    with result.path.open(encoding="utf-8-sig", newline="") as handle:
        written = list(csv.DictReader(handle))
    assert written == [{"id": "1", "title": "Quiz", "isPublished": "true", "resetToken": ""}]
    assert result.source == "local"


@responses.activate
def test_server_export_uses_current_filters_without_paging(http, admin_auth, tmp_path) -> None:
    responses.add(
        responses.GET,
        f"{API}/enrollments/admin/export",
        body=b"student,status\nAda,active\n",
        content_type="text/csv",
        match=[
            matchers.query_param_matcher(
                {"sortBy": "enrollmentDate", "sortOrder": "desc", "studentName": "Ada", "status": "active"}
            ),
            matchers.header_matcher({"Authorization": "Bearer admin-token"}),
        ],
    )
    controller = ListViewController(ADMIN_ENROLLMENTS, http, admin_auth, auto_fetch=False)
    controller.set_filter("search", "Ada")
    controller.set_filter("status", "active")

    result = controller.export(tmp_path, today=TODAY)

    assert result.success is True
    assert result.message == "Export completed successfully"
    assert result.artifact.path.name == "enrollments-export-2024-05-17.csv"
    assert result.artifact.path.read_bytes() == b"student,status\nAda,active\n"


@responses.activate
def test_server_export_failure_is_reported(http, admin_auth, tmp_path) -> None:
    responses.add(responses.GET, f"{API}/enrollments/admin/export", json={"message": "Export too large"}, status=400)
    controller = ListViewController(ADMIN_ENROLLMENTS, http, admin_auth, auto_fetch=False)
    result = controller.export(tmp_path, today=TODAY)
    assert result.success is False
    assert result.message == "Export failed: Export too large"
    assert not list(tmp_path.iterdir())


@responses.activate
def test_local_export_writes_filtered_rows(http, instructor_auth, tmp_path) -> None:
    responses.add(
        responses.GET,
        f"{API}/quizzes/instructor",
        json={
            "success": True,
            "data": {
                "quizzes": [
                    {"_id": "q1", "title": "Final exam", "isPublished": True},
                    {"_id": "q2", "title": "Warm-up", "isPublished": False},
                ]
            },
        },
    )
    controller = ListViewController(INSTRUCTOR_QUIZZES, http, instructor_auth)
    controller.fetch_page()
    controller.set_filter("isPublished", "true")

    result = controller.export(tmp_path, today=TODAY)

    assert result.success is True
    assert result.artifact.path.name == "quizzes-export-2024-05-17.csv"
    with result.artifact.path.open(encoding="utf-8-sig", newline="") as handle:
        rows = list(csv.DictReader(handle))
    assert [row["id"] for row in rows] == ["q1"]
    assert rows[0]["title"] == "Final exam"
