from .auth_store import AuthStore
from .config import ClientConfig, ConfigError, load_config
from .exceptions import (
    ApiError,
    AuthError,
    ConflictError,
    EnvelopeError,
    NotFoundError,
    PermissionError,
    ServerError,
    TransportError,
    ValidationError,
)
from .http_client import HttpClient
from .listing.controller import ActionResult, ListViewController, ViewStatus
from .listing.filter_state import FilterState
from .listing.mutation_policy import MutationPolicy, NoRefetch, RefetchAfterMutation
from .listing.pagination import PageResult
from .listing.resources import RESOURCES, ResourceSpec, get_resource
from .models import Course, Enrollment, Lesson, ListItem, Quiz, Review, SortOrder, User
from .session import AuthContext, persist_auth_context, restore_auth_context
from .validation import ClientValidationError, ValidationIssue
from .views import open_view

__version__ = "0.1.0"

__all__ = [
    "ActionResult",
    "ApiError",
    "AuthContext",
    "AuthError",
    "AuthStore",
    "ClientConfig",
    "ClientValidationError",
    "ConfigError",
    "ConflictError",
    "Course",
    "Enrollment",
    "EnvelopeError",
    "FilterState",
    "HttpClient",
    "Lesson",
    "ListItem",
    "ListViewController",
    "MutationPolicy",
    "NoRefetch",
    "NotFoundError",
    "PageResult",
    "PermissionError",
    "Quiz",
    "RESOURCES",
    "RefetchAfterMutation",
    "ResourceSpec",
    "Review",
    "ServerError",
    "SortOrder",
    "TransportError",
    "User",
    "ValidationError",
    "ValidationIssue",
    "ViewStatus",
    "get_resource",
    "load_config",
    "open_view",
    "persist_auth_context",
    "restore_auth_context",
]
