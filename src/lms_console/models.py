from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from enum import Enum
from typing import Any, List

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class UserRole(str, Enum):
    STUDENT = "student"
    INSTRUCTOR = "instructor"
    ADMIN = "admin"


class EnrollmentStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    SUSPENDED = "suspended"
    REFUNDED = "refunded"


class CourseLevel(str, Enum):
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"


class WireModel(BaseModel):
    """Base for API payloads: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(extra="allow", populate_by_name=True, alias_generator=to_camel)


class PersonRef(WireModel):
    id: str | None = Field(default=None, validation_alias=AliasChoices("_id", "id"))
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)


class TitledRef(WireModel):
    """A populated course or lesson reference (`_id` plus `title`)."""

    id: str | None = Field(default=None, validation_alias=AliasChoices("_id", "id"))
    title: str | None = None


class ListItem(WireModel):
    id: str | int = Field(validation_alias=AliasChoices("_id", "id"))
    created_at: datetime | None = None
    updated_at: datetime | None = None


class Course(ListItem):
    title: str | None = None
    description: str | None = None
    short_description: str | None = None
    category: str | None = None
    level: str | None = None
    price: float | None = None
    is_published: bool | None = None
    is_featured: bool | None = None
    status: str | None = None
    instructor: PersonRef | str | None = None
    duration: float | None = None
    total_enrollments: int | None = None
    average_rating: float | None = None
    total_ratings: int | None = None


class Lesson(ListItem):
    title: str | None = None
    description: str | None = None
    course: TitledRef | str | None = None
    section: str | None = None
    order: int | None = None
    type: str | None = None
    is_published: bool | None = None


class Quiz(ListItem):
    title: str | None = None
    description: str | None = None
    course: TitledRef | str | None = None
    lesson: TitledRef | str | None = None
    instructor: PersonRef | str | None = None
    questions: List[dict[str, Any]] = Field(default_factory=list)
    is_published: bool | None = None


class EnrollmentPayment(WireModel):
    amount: float | None = None
    currency: str | None = None
    payment_status: str | None = None


class EnrollmentProgress(WireModel):
    total_lessons: int | None = None
    completion_percentage: float | None = None


class Enrollment(ListItem):
    student: PersonRef | str | None = None
    course: TitledRef | str | None = None
    status: str | None = None
    enrollment_date: datetime | None = None
    progress: EnrollmentProgress | None = None
    payment: EnrollmentPayment | None = None


class Review(ListItem):
    course: TitledRef | str | None = None
    student: PersonRef | str | None = None
    rating: int | None = None
    title: str | None = None
    comment: str | None = None
    is_approved: bool | None = None
    is_verified: bool | None = None
    report_count: int | None = None


class User(ListItem):
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    role: str | None = None
    status: str | None = None
    is_active: bool | None = None


class Pagination(WireModel):
    current_page: int | None = None
    total_pages: int | None = None
    total_items: int | None = None
    limit: int | None = None
    has_next_page: bool | None = None
    has_prev_page: bool | None = None

    def resolved_total(self) -> int | None:
        """Total count under ``totalItems`` or any ``total<Entity>`` key."""
        if self.total_items is not None:
            return self.total_items
        for key, value in (self.model_extra or {}).items():
            if key.startswith("total") and key != "totalPages" and isinstance(value, int):
                return value
        return None


class SessionData(BaseModel):
    access_token: str
    role: str | None = None
    user_id: str | None = None
    env_name: str | None = None


def field_value(item: Any, path: str) -> Any:
    """Read ``path`` (dotted, wire names allowed) from a mapping or model."""
    current = item
    for segment in path.split("."):
        if current is None:
            return None
        if isinstance(current, Mapping):
            current = current.get(segment)
        elif isinstance(current, BaseModel):
            current = _model_attr(current, segment)
        else:
            return None
    return current


def _model_attr(model: BaseModel, name: str) -> Any:
    fields = type(model).model_fields
    if name in fields:
        return getattr(model, name)
    for field_name, info in fields.items():
        if info.alias == name:
            return getattr(model, field_name)
        choices = info.validation_alias
        if isinstance(choices, AliasChoices) and name in choices.choices:
            return getattr(model, field_name)
    return (model.model_extra or {}).get(name)
