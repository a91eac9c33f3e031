"""URL construction for API requests"""

from typing import Any, Mapping, Optional

import httpx


def _param_value(value: Any) -> str:
    # Render booleans the way the backend's query parser expects
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_url(base_url: str, path: str, params: Optional[Mapping[str, Any]] = None) -> str:
    """Join base URL and path, appending URL-encoded query parameters

    Parameters whose value is None or an empty string are omitted.

    Args:
        base_url: Backend origin, e.g. http://localhost:8088
        path: Absolute path including the versioned prefix
        params: Optional query parameters

    Returns:
        Full URL string
    """
    url = httpx.URL(base_url.rstrip("/") + "/" + path.lstrip("/"))

    if params:
        query = [
            (key, _param_value(value))
            for key, value in params.items()
            if value is not None and value != ""
        ]
        if query:
            url = url.copy_merge_params(query)

    return str(url)


def is_auth_path(path: str, auth_prefix: str) -> bool:
    """True if the path is an authentication endpoint exempt from refresh"""
    return ("/" + path.lstrip("/")).startswith(auth_prefix)
