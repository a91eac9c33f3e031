"""Error type raised for every failed API call"""

from enum import Enum
from typing import Any, Dict, List, Optional

import httpx

from .models import ApiErrorResponse


class ErrorCode(str, Enum):
    """Machine-readable error codes

    Server codes are passed through verbatim, so ``ApiClientError.code`` may
    also hold values outside this enum.
    """
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"
    TIMEOUT = "TIMEOUT"
    RATE_LIMIT = "RATE_LIMIT"


# Fallback codes when a failure body is not a valid error envelope
STATUS_CODE_MAP: Dict[int, ErrorCode] = {
    400: ErrorCode.VALIDATION_ERROR,
    401: ErrorCode.UNAUTHORIZED,
    403: ErrorCode.FORBIDDEN,
    404: ErrorCode.NOT_FOUND,
    422: ErrorCode.VALIDATION_ERROR,
    429: ErrorCode.RATE_LIMIT,
}


class ApiClientError(Exception):
    """A failed API call

    Attributes:
        code: Machine-readable error code
        message: Human-readable message suitable for display
        status: HTTP status (0 when no response was received)
        details: Field-level validation errors, if any
    """

    def __init__(
        self,
        message: str,
        code: str,
        status: int,
        details: Optional[Dict[str, List[str]]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code.value if isinstance(code, ErrorCode) else code
        self.status = status
        self.details = details

    def __repr__(self) -> str:
        return f"ApiClientError(code={self.code!r}, status={self.status}, message={self.message!r})"

    def field_errors(self, field: str) -> List[str]:
        """Validation messages for one field (empty if none)"""
        if not self.details:
            return []
        return list(self.details.get(field, []))

    @classmethod
    def from_status(cls, status: int, message: Optional[str] = None) -> "ApiClientError":
        """Build from the HTTP status alone when there is no usable envelope"""
        code = STATUS_CODE_MAP.get(status, ErrorCode.INTERNAL_ERROR)
        return cls(message or f"Request failed with status {status}", code, status)

    @classmethod
    def from_envelope(cls, payload: Any, status: int) -> "ApiClientError":
        """Build from a ``{success: false, error: {...}}`` envelope"""
        try:
            envelope = ApiErrorResponse.model_validate(payload)
        except ValueError:
            return cls.from_status(status)

        error = envelope.error
        return cls(error.message, error.code, status, error.details)

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ApiClientError":
        """Build from a failed HTTP response, tolerating non-envelope bodies"""
        try:
            envelope = ApiErrorResponse.model_validate(response.json())
        except ValueError:
            return cls.from_status(response.status_code, response.reason_phrase)

        error = envelope.error
        return cls(error.message, error.code, response.status_code, error.details)

    @classmethod
    def network_error(cls) -> "ApiClientError":
        return cls("Network error. Please check your connection.", ErrorCode.NETWORK_ERROR, 0)

    @classmethod
    def timeout_error(cls) -> "ApiClientError":
        return cls("Request timed out. Please try again.", ErrorCode.TIMEOUT, 408)

    @classmethod
    def session_expired(cls) -> "ApiClientError":
        return cls("Session expired", ErrorCode.UNAUTHORIZED, 401)

    @classmethod
    def no_refresh_token(cls) -> "ApiClientError":
        return cls("No refresh token available", ErrorCode.UNAUTHORIZED, 401)

    @classmethod
    def invalid_response(cls, status: int) -> "ApiClientError":
        return cls("Invalid response from server", ErrorCode.INTERNAL_ERROR, status)
