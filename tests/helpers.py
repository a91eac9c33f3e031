"""Fake Lux backend for driving ApiClient through httpx.MockTransport"""

import asyncio
import json
from typing import Any, Callable, Dict, List, Optional, Set, Tuple

import httpx

REFRESH_URL_PATH = "/api/v1/auth/refresh"


def envelope(data: Any = None, message: Optional[str] = None) -> Dict[str, Any]:
    payload = {"success": True, "data": data, "timestamp": "2026-10-19T09:00:00Z"}
    if message is not None:
        payload["message"] = message
    return payload


def error_envelope(code: str, message: str, details: Optional[Dict[str, List[str]]] = None) -> Dict[str, Any]:
    error: Dict[str, Any] = {"code": code, "message": message}
    if details is not None:
        error["details"] = details
    return {"success": False, "error": error, "timestamp": "2026-10-19T09:00:00Z"}


def bearer(request: httpx.Request) -> Optional[str]:
    auth = request.headers.get("Authorization")
    if auth and auth.startswith("Bearer "):
        return auth[len("Bearer "):]
    return None


async def wait_until(predicate: Callable[[], bool], attempts: int = 500):
    """Yield to the event loop until predicate holds"""
    for _ in range(attempts):
        if predicate():
            return
        await asyncio.sleep(0.001)
    raise AssertionError("condition not reached")


class FakeBackend:
    """Backend that accepts a set of access tokens and rotates refresh tokens

    Attributes:
        valid_access: Access tokens currently accepted
        rotations: refresh token -> (new access, new refresh)
        refresh_gate: When set, refresh responses wait for this event
        reject_all: Answer 401 to every non-refresh request
    """

    def __init__(
        self,
        valid_access: Optional[Set[str]] = None,
        rotations: Optional[Dict[str, Tuple[str, str]]] = None,
    ):
        self.valid_access: Set[str] = set(valid_access or ())
        self.rotations: Dict[str, Tuple[str, str]] = dict(rotations or {})
        self.refresh_gate: Optional[asyncio.Event] = None
        self.reject_all = False
        self.requests: List[httpx.Request] = []
        self.refresh_requests: List[httpx.Request] = []
        self.unauthorized_count = 0

    @property
    def refresh_calls(self) -> int:
        return len(self.refresh_requests)

    @property
    def api_requests(self) -> List[httpx.Request]:
        return [r for r in self.requests if r.url.path != REFRESH_URL_PATH]

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == REFRESH_URL_PATH:
            return await self._refresh(request)

        token = bearer(request)
        if self.reject_all or token not in self.valid_access:
            self.unauthorized_count += 1
            return httpx.Response(401, json=error_envelope("UNAUTHORIZED", "Invalid or expired token"))

        return httpx.Response(200, json=envelope({"path": request.url.path, "token": token}))

    async def _refresh(self, request: httpx.Request) -> httpx.Response:
        self.refresh_requests.append(request)
        if self.refresh_gate is not None:
            await self.refresh_gate.wait()

        refresh_token = json.loads(request.content).get("refreshToken")
        pair = self.rotations.pop(refresh_token, None)
        if pair is None:
            return httpx.Response(401, json=error_envelope("UNAUTHORIZED", "Invalid refresh token"))

        access_token, new_refresh_token = pair
        self.valid_access = {access_token}
        return httpx.Response(
            200,
            json=envelope({"accessToken": access_token, "refreshToken": new_refresh_token}),
        )
