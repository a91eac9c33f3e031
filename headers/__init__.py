"""HTTP headers and wire constants package for the Lux API client"""

from .constants import (
    API_PREFIX,
    AUTH_PATH_PREFIX,
    REFRESH_PATH,
    DEFAULT_HEADERS,
    ACCESS_TOKEN_KEY,
    REFRESH_TOKEN_KEY,
)

__all__ = [
    "API_PREFIX",
    "AUTH_PATH_PREFIX",
    "REFRESH_PATH",
    "DEFAULT_HEADERS",
    "ACCESS_TOKEN_KEY",
    "REFRESH_TOKEN_KEY",
]
