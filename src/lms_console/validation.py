from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping

from .models import CourseLevel, EnrollmentStatus, UserRole

PayloadValidator = Callable[[Mapping[str, Any]], None]

LESSON_TYPES = {"video", "text", "quiz", "assignment", "document"}
QUESTION_TYPES = {"multiple-choice", "true-false", "short-answer", "essay"}


@dataclass(frozen=True)
class ValidationIssue:
    field: str
    reason: str


class ClientValidationError(ValueError):
    def __init__(self, issues: list[ValidationIssue]) -> None:
        self.issues = issues
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if not self.issues:
            return "Validation failed"
        issue = self.issues[0]
        return f"{issue.field}: {issue.reason}"

    def by_field(self) -> dict[str, str]:
        fields: dict[str, str] = {}
        for issue in self.issues:
            fields.setdefault(issue.field, issue.reason)
        return fields


class _Collector:
    def __init__(self, payload: Mapping[str, Any]) -> None:
        self.payload = payload
        self.issues: list[ValidationIssue] = []

    def add(self, field: str, reason: str) -> None:
        self.issues.append(ValidationIssue(field=field, reason=reason))

    def required_text(self, field: str, label: str, max_length: int | None = None) -> None:
        value = self.payload.get(field)
        if not isinstance(value, str) or not value.strip():
            self.add(field, f"{label} is required")
            return
        if max_length is not None and len(value.strip()) > max_length:
            self.add(field, f"{label} cannot exceed {max_length} characters")

    def number(self, field: str, label: str, *, minimum: float | None = None, required: bool = True) -> None:
        value = self.payload.get(field)
        if value is None or value == "":
            if required:
                self.add(field, f"{label} is required")
            return
        try:
            number = float(value)
        except (TypeError, ValueError):
            self.add(field, f"{label} must be a number")
            return
        if minimum is not None and number < minimum:
            self.add(field, f"{label} must be at least {minimum:g}")

    def one_of(self, field: str, label: str, allowed: set[str]) -> None:
        value = self.payload.get(field)
        if value not in allowed:
            self.add(field, f"{label} must be one of: {', '.join(sorted(allowed))}")

    def raise_if_any(self) -> None:
        if self.issues:
            raise ClientValidationError(self.issues)


def validate_course(payload: Mapping[str, Any]) -> None:
    check = _Collector(payload)
    check.required_text("title", "Course title", max_length=100)
    check.required_text("description", "Course description", max_length=2000)
    check.required_text("shortDescription", "Short description", max_length=200)
    check.required_text("category", "Course category")
    check.one_of("level", "Course level", {level.value for level in CourseLevel})
    check.number("price", "Course price", minimum=0)
    check.number("duration", "Course duration", minimum=0.5)
    check.raise_if_any()


def validate_lesson(payload: Mapping[str, Any]) -> None:
    check = _Collector(payload)
    check.required_text("title", "Lesson title", max_length=100)
    check.required_text("course", "Course")
    check.required_text("section", "Section")
    check.number("order", "Lesson order", minimum=1)
    check.one_of("type", "Lesson type", LESSON_TYPES)
    check.raise_if_any()


def validate_quiz(payload: Mapping[str, Any]) -> None:
    check = _Collector(payload)
    check.required_text("title", "Quiz title")
    check.required_text("course", "Course")
    questions = payload.get("questions")
    if not isinstance(questions, list) or not questions:
        check.add("questions", "At least one question is required")
        check.raise_if_any()
    for index, question in enumerate(questions):
        prefix = f"questions[{index}]"
        if not isinstance(question, Mapping):
            check.add(prefix, "Question must be an object")
            continue
        text = question.get("question")
        if not isinstance(text, str) or not text.strip():
            check.add(f"{prefix}.question", "Question text is required")
        kind = question.get("type", "multiple-choice")
        if kind not in QUESTION_TYPES:
            check.add(f"{prefix}.type", f"Question type must be one of: {', '.join(sorted(QUESTION_TYPES))}")
            continue
        if kind in {"multiple-choice", "true-false"}:
            options = [
                option
                for option in question.get("options") or []
                if isinstance(option, Mapping) and str(option.get("text") or "").strip()
            ]
            if len(options) < 2:
                check.add(f"{prefix}.options", "At least two options are required")
            elif not any(option.get("isCorrect") for option in options):
                check.add(f"{prefix}.options", "Mark at least one option as correct")
    check.raise_if_any()


def validate_user_role(payload: Mapping[str, Any]) -> None:
    check = _Collector(payload)
    check.one_of("role", "Role", {role.value for role in UserRole})
    check.raise_if_any()


def validate_user_status(payload: Mapping[str, Any]) -> None:
    if not isinstance(payload.get("isActive"), bool):
        raise ClientValidationError([ValidationIssue(field="isActive", reason="isActive must be a boolean value")])


def validate_enrollment_status(payload: Mapping[str, Any]) -> None:
    check = _Collector(payload)
    check.one_of("status", "Status", {status.value for status in EnrollmentStatus})
    check.raise_if_any()


def validate_extension(payload: Mapping[str, Any]) -> None:
    check = _Collector(payload)
    check.number("extensionDays", "Extension days", minimum=1)
    check.raise_if_any()


def validate_review_approval(payload: Mapping[str, Any]) -> None:
    if not isinstance(payload.get("approved"), bool):
        raise ClientValidationError([ValidationIssue(field="approved", reason="approved must be a boolean value")])


def validate_publish(payload: Mapping[str, Any]) -> None:
    if not isinstance(payload.get("isPublished"), bool):
        raise ClientValidationError([ValidationIssue(field="isPublished", reason="isPublished must be a boolean value")])


def require_fields(*fields: str) -> PayloadValidator:
    def _validate(payload: Mapping[str, Any]) -> None:
        check = _Collector(payload)
        for name in fields:
            check.required_text(name, name)
        check.raise_if_any()

    return _validate


def require_payload(payload: Mapping[str, Any]) -> None:
    if not payload:
        raise ClientValidationError([ValidationIssue(field="payload", reason="Nothing to update")])
