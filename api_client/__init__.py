"""Authenticated API client package for the Lux backend"""

from .errors import ApiClientError, ErrorCode
from .models import ApiResponse, ApiErrorResponse, ErrorDetail, TokenPair
from .url_builder import build_url, is_auth_path
from .single_flight import RefreshCoordinator, RefreshState
from .token_refresh import refresh_session_tokens
from .client import ApiClient, RequestCancelled, parse_response, wait_or_cancel

__all__ = [
    "ApiClientError",
    "ErrorCode",
    "ApiResponse",
    "ApiErrorResponse",
    "ErrorDetail",
    "TokenPair",
    "build_url",
    "is_auth_path",
    "RefreshCoordinator",
    "RefreshState",
    "refresh_session_tokens",
    "ApiClient",
    "RequestCancelled",
    "parse_response",
    "wait_or_cancel",
]
