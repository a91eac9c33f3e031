"""Pydantic models for the backend's JSON envelopes"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field


class ApiResponse(BaseModel):
    """Success envelope: ``{success, data, message?, timestamp}``"""
    model_config = ConfigDict(extra="allow")

    success: bool
    data: Any = None
    message: Optional[str] = None
    timestamp: Optional[str] = None


class ErrorDetail(BaseModel):
    """Body of a failure envelope"""
    code: str
    message: str
    details: Optional[Dict[str, List[str]]] = None


class ApiErrorResponse(BaseModel):
    """Failure envelope: ``{success: false, error: {code, message, details?}}``"""
    success: bool = False
    error: ErrorDetail
    timestamp: Optional[str] = None


class TokenPair(BaseModel):
    """Access/refresh credential pair as issued by login and refresh"""
    model_config = ConfigDict(populate_by_name=True)

    access_token: str = Field(alias="accessToken", min_length=1)
    refresh_token: str = Field(alias="refreshToken", min_length=1)

    @classmethod
    def from_payload(cls, payload: Any) -> "TokenPair":
        """Find the token pair in an auth response body

        The backend returns the pair either inside ``data``, inside
        ``data.tokens``, or at the top level.

        Raises:
            ValueError: if no token pair is present (pydantic's
                ValidationError is a ValueError subclass)
        """
        candidates = []
        if isinstance(payload, dict):
            data = payload.get("data")
            if isinstance(data, dict):
                candidates.extend([data, data.get("tokens")])
            candidates.extend([payload, payload.get("tokens")])

        for candidate in candidates:
            if isinstance(candidate, dict) and "accessToken" in candidate:
                return cls.model_validate(candidate)

        raise ValueError("Response does not contain an access/refresh token pair")
