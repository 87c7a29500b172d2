"""Declarative descriptions of the admin and instructor list screens."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

from ..models import Course, Enrollment, Lesson, ListItem, Quiz, Review, SortOrder, User
from ..validation import (
    PayloadValidator,
    require_fields,
    require_payload,
    validate_course,
    validate_enrollment_status,
    validate_extension,
    validate_lesson,
    validate_publish,
    validate_quiz,
    validate_review_approval,
    validate_user_role,
    validate_user_status,
)

ADMIN_ONLY = ("admin",)
INSTRUCTOR_OR_ADMIN = ("instructor", "admin")


class FilterMode(str, Enum):
    SERVER = "server"
    LOCAL = "local"


@dataclass(frozen=True)
class ActionSpec:
    method: str
    path: str
    validator: PayloadValidator | None = None


@dataclass(frozen=True)
class BulkSpec:
    method: str
    path: str
    ids_key: str


@dataclass(frozen=True)
class ResourceSpec:
    name: str
    path: str
    collection: str
    schema: type[ListItem]
    roles: tuple[str, ...]
    mode: FilterMode = FilterMode.SERVER
    search_param: str = "search"
    searchable_fields: tuple[str, ...] = ()
    category_filters: Mapping[str, str] = field(default_factory=dict)
    sortable_fields: tuple[str, ...] = ("createdAt",)
    default_sort: str = "createdAt"
    default_direction: SortOrder = SortOrder.DESC
    actions: Mapping[str, ActionSpec] = field(default_factory=dict)
    bulk: BulkSpec | None = None
    create: ActionSpec | None = None
    export_path: str | None = None
    local_fetch_limit: int = 1000

    def resolve(self, template: str, path_params: Mapping[str, Any], **extra: Any) -> str:
        values = {**path_params, **extra}
        try:
            return template.format(**values)
        except KeyError as exc:
            raise ValueError(f"{self.name}: missing path parameter {exc.args[0]!r}") from exc

    def action(self, name: str) -> ActionSpec:
        try:
            return self.actions[name]
        except KeyError as exc:
            known = ", ".join(sorted(self.actions)) or "none"
            raise ValueError(f"{self.name}: unknown action {name!r} (known: {known})") from exc


ADMIN_COURSES = ResourceSpec(
    name="admin_courses",
    path="/courses/admin/all",
    collection="courses",
    schema=Course,
    roles=ADMIN_ONLY,
    searchable_fields=("title", "description", "instructor.firstName", "instructor.lastName"),
    category_filters={"category": "", "level": "", "status": "", "instructor": ""},
    sortable_fields=("createdAt", "title", "price", "totalEnrollments", "averageRating"),
    actions={
        "status": ActionSpec("PUT", "/courses/admin/{id}/status", require_payload),
        "delete": ActionSpec("DELETE", "/courses/admin/{id}"),
    },
    bulk=BulkSpec("PUT", "/courses/admin/bulk-action", ids_key="courseIds"),
)

ADMIN_USERS = ResourceSpec(
    name="admin_users",
    path="/users",
    collection="users",
    schema=User,
    roles=ADMIN_ONLY,
    searchable_fields=("firstName", "lastName", "email"),
    category_filters={"role": "all"},
    sortable_fields=("createdAt", "firstName", "lastName", "email", "role"),
    actions={
        "role": ActionSpec("PUT", "/users/{id}/role", validate_user_role),
        "status": ActionSpec("PUT", "/users/{id}/status", validate_user_status),
        "delete": ActionSpec("DELETE", "/users/{id}"),
    },
)

ADMIN_ENROLLMENTS = ResourceSpec(
    name="admin_enrollments",
    path="/enrollments/admin/search",
    collection="enrollments",
    schema=Enrollment,
    roles=ADMIN_ONLY,
    search_param="studentName",
    searchable_fields=("student.firstName", "student.lastName", "student.email", "course.title"),
    category_filters={
        "studentEmail": "",
        "courseTitle": "",
        "status": "all",
        "paymentStatus": "all",
        "enrollmentDateFrom": "",
        "enrollmentDateTo": "",
        "completionMin": "",
        "completionMax": "",
    },
    sortable_fields=("enrollmentDate", "status", "progress.completionPercentage"),
    default_sort="enrollmentDate",
    actions={
        "status": ActionSpec("PUT", "/enrollments/{id}/status", validate_enrollment_status),
        "delete": ActionSpec("DELETE", "/enrollments/{id}"),
        "admin_notes": ActionSpec("PUT", "/enrollments/{id}/admin-notes", require_fields("notes")),
        "extend": ActionSpec("PUT", "/enrollments/{id}/extend", validate_extension),
    },
    export_path="/enrollments/admin/export",
)

ADMIN_REVIEWS = ResourceSpec(
    name="admin_reviews",
    path="/reviews/admin/all",
    collection="reviews",
    schema=Review,
    roles=ADMIN_ONLY,
    searchable_fields=("title", "comment", "course.title", "student.firstName", "student.lastName"),
    category_filters={"status": "all", "rating": "all"},
    sortable_fields=("createdAt", "rating", "reportCount"),
    actions={
        "approve": ActionSpec("PUT", "/reviews/{id}/approve", validate_review_approval),
        "reply": ActionSpec("POST", "/reviews/{id}/reply", require_fields("message")),
        "delete": ActionSpec("DELETE", "/reviews/{id}"),
    },
)

INSTRUCTOR_COURSES = ResourceSpec(
    name="instructor_courses",
    path="/courses/my-courses",
    collection="courses",
    schema=Course,
    roles=INSTRUCTOR_OR_ADMIN,
    mode=FilterMode.LOCAL,
    searchable_fields=("title", "description", "shortDescription"),
    category_filters={"isPublished": "all", "category": "all"},
    sortable_fields=("createdAt", "title", "price", "totalEnrollments"),
    actions={
        "publish": ActionSpec("PUT", "/courses/{id}/publish", validate_publish),
        "update": ActionSpec("PUT", "/courses/{id}", validate_course),
        "delete": ActionSpec("DELETE", "/courses/{id}"),
    },
    create=ActionSpec("POST", "/courses", validate_course),
)

INSTRUCTOR_LESSONS = ResourceSpec(
    name="instructor_lessons",
    path="/lessons/course/{course_id}",
    collection="lessons",
    schema=Lesson,
    roles=INSTRUCTOR_OR_ADMIN,
    mode=FilterMode.LOCAL,
    searchable_fields=("title", "description"),
    category_filters={"type": "all", "section": "all"},
    sortable_fields=("order", "title", "section", "createdAt"),
    default_sort="order",
    default_direction=SortOrder.ASC,
    actions={
        "update": ActionSpec("PUT", "/lessons/{id}", validate_lesson),
        "delete": ActionSpec("DELETE", "/lessons/{id}"),
    },
    create=ActionSpec("POST", "/lessons", validate_lesson),
)

INSTRUCTOR_QUIZZES = ResourceSpec(
    name="instructor_quizzes",
    path="/quizzes/instructor",
    collection="quizzes",
    schema=Quiz,
    roles=INSTRUCTOR_OR_ADMIN,
    mode=FilterMode.LOCAL,
    searchable_fields=("title", "description"),
    category_filters={"isPublished": "all", "course": "all"},
    sortable_fields=("createdAt", "title"),
    actions={
        "publish": ActionSpec("PUT", "/quizzes/{id}/publish", validate_publish),
        "update": ActionSpec("PUT", "/quizzes/{id}", validate_quiz),
        "delete": ActionSpec("DELETE", "/quizzes/{id}"),
    },
    create=ActionSpec("POST", "/quizzes", validate_quiz),
)

INSTRUCTOR_ENROLLMENTS = ResourceSpec(
    name="instructor_enrollments",
    path="/enrollments/course/{course_id}",
    collection="enrollments",
    schema=Enrollment,
    roles=INSTRUCTOR_OR_ADMIN,
    searchable_fields=("student.firstName", "student.lastName", "student.email"),
    category_filters={"status": "all"},
    sortable_fields=("enrollmentDate", "progress.completionPercentage"),
    default_sort="enrollmentDate",
    actions={
        "status": ActionSpec("PUT", "/enrollments/{id}/status", validate_enrollment_status),
    },
    export_path="/enrollments/course/{course_id}/export",
)

RESOURCES: dict[str, ResourceSpec] = {
    spec.name: spec
    for spec in (
        ADMIN_COURSES,
        ADMIN_USERS,
        ADMIN_ENROLLMENTS,
        ADMIN_REVIEWS,
        INSTRUCTOR_COURSES,
        INSTRUCTOR_LESSONS,
        INSTRUCTOR_QUIZZES,
        INSTRUCTOR_ENROLLMENTS,
    )
}


def get_resource(name: str) -> ResourceSpec:
    try:
        return RESOURCES[name]
    except KeyError as exc:
        raise ValueError(f"Unknown resource {name!r}") from exc
