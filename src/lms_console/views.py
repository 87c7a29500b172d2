from __future__ import annotations

from typing import Any

from .config import ClientConfig, load_config
from .http_client import HttpClient
from .listing.controller import ListViewController
from .listing.resources import get_resource
from .session import AuthContext


def open_view(
    name: str,
    auth: AuthContext,
    *,
    config: ClientConfig | None = None,
    http: HttpClient | None = None,
    path_params: dict[str, Any] | None = None,
    **options: Any,
) -> ListViewController:
    """Build the controller for one of the catalogued list screens."""
    if http is None:
        http = HttpClient(config=config or load_config())
    return ListViewController(get_resource(name), http, auth, path_params=path_params, **options)
