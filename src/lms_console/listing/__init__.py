from .derivation import apply_local_derivation
from .filter_state import FilterState, build_query, default_filter_state, goto_page, set_filter, set_sort
from .pagination import PageResult, clamp_page, paginate, total_pages
from .resources import RESOURCES, ActionSpec, BulkSpec, FilterMode, ResourceSpec, get_resource

__all__ = [
    "ActionSpec",
    "BulkSpec",
    "FilterMode",
    "FilterState",
    "PageResult",
    "RESOURCES",
    "ResourceSpec",
    "apply_local_derivation",
    "build_query",
    "clamp_page",
    "default_filter_state",
    "get_resource",
    "goto_page",
    "paginate",
    "set_filter",
    "set_sort",
    "total_pages",
]
