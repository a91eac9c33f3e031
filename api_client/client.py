"""Authenticated HTTP client for the Lux backend

Every call goes through ``ApiClient.request``, which runs at most two
attempts:

    ATTEMPT -> DONE
    ATTEMPT -> NEED_REFRESH -> REFRESHED_RETRY -> DONE

A 401 on a non-auth path (with a refresh token stored) moves to
NEED_REFRESH. The refresh is single-flight across all in-flight requests.
The retry's outcome is final and is never refreshed again.
"""

import asyncio
import json
import logging
from typing import Any, Awaitable, Dict, Mapping, Optional, TypeVar

import httpx

from headers import API_PREFIX, AUTH_PATH_PREFIX, DEFAULT_HEADERS
from settings import API_BASE_URL, REQUEST_TIMEOUT_MS
from utils.storage import CredentialStore, create_credential_store
from .errors import ApiClientError
from .models import ApiResponse
from .single_flight import RefreshCoordinator
from .token_refresh import refresh_session_tokens
from .url_builder import build_url, is_auth_path

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RequestCancelled(Exception):
    """The caller's cancel event fired before the awaited operation finished"""


async def wait_or_cancel(awaitable: Awaitable[T], cancel_event: asyncio.Event) -> T:
    """Await ``awaitable`` unless ``cancel_event`` is set first

    If both finish together the result wins.

    Raises:
        RequestCancelled: if the event fired first (the operation is cancelled)
    """
    operation = asyncio.ensure_future(awaitable)
    cancelled = asyncio.ensure_future(cancel_event.wait())
    try:
        await asyncio.wait({operation, cancelled}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        for task in (operation, cancelled):
            if not task.done():
                task.cancel()

    if operation.done() and not operation.cancelled():
        return operation.result()
    raise RequestCancelled()


def parse_response(response: httpx.Response) -> ApiResponse:
    """Translate an HTTP response into a success envelope or raise

    Raises:
        ApiClientError: for non-2xx statuses, ``success: false`` bodies and
            bodies that are not a JSON envelope
    """
    if not response.is_success:
        raise ApiClientError.from_response(response)

    if not response.content:
        return ApiResponse(success=True, data=None)

    try:
        payload = response.json()
    except ValueError:
        raise ApiClientError.invalid_response(response.status_code)

    if not isinstance(payload, dict):
        raise ApiClientError.invalid_response(response.status_code)
    if payload.get("success") is False:
        raise ApiClientError.from_envelope(payload, response.status_code)

    if "success" not in payload:
        payload = {**payload, "success": True}
    return ApiResponse.model_validate(payload)


class ApiClient:
    """HTTP client with bearer auth and transparent token refresh"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout_ms: Optional[int] = None,
        default_headers: Optional[Dict[str, str]] = None,
        storage: Optional[CredentialStore] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            base_url: Backend origin (default: LUX_API_URL)
            timeout_ms: Per-request deadline (default: LUX_REQUEST_TIMEOUT_MS)
            default_headers: Headers sent with every request
            storage: Credential store (default: configured backend)
            transport: Optional httpx transport, e.g. httpx.MockTransport in tests
        """
        self.base_url = base_url or API_BASE_URL
        self.timeout_ms = timeout_ms if timeout_ms is not None else REQUEST_TIMEOUT_MS
        self.default_headers = dict(default_headers if default_headers is not None else DEFAULT_HEADERS)
        self.storage = storage if storage is not None else create_credential_store()
        # Deadlines are enforced per request with asyncio, not by httpx
        self._http = httpx.AsyncClient(transport=transport, timeout=None)
        self._refresh = RefreshCoordinator(self._refresh_tokens)

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    @property
    def is_refreshing(self) -> bool:
        return self._refresh.is_refreshing

    def _auth_headers(self) -> Dict[str, str]:
        token = self.storage.get_access_token()
        return {"Authorization": f"Bearer {token}"} if token else {}

    def _merge_headers(self, headers: Optional[Mapping[str, str]]) -> httpx.Headers:
        merged = httpx.Headers(self.default_headers)
        merged.update(self._auth_headers())
        if headers:
            merged.update(headers)
        return merged

    async def _refresh_tokens(self) -> None:
        await refresh_session_tokens(
            self._http,
            self.base_url,
            self.default_headers,
            self.storage,
            self.timeout_ms,
        )

    async def refresh_session(self, cancel_event: Optional[asyncio.Event] = None) -> None:
        """Run (or join) the single-flight refresh

        On failure the stored credentials are cleared.

        Raises:
            ApiClientError: UNAUTHORIZED "Session expired" if the refresh failed,
                TIMEOUT if ``cancel_event`` fired while waiting
        """
        try:
            if cancel_event is not None:
                await wait_or_cancel(self._refresh.run(), cancel_event)
            else:
                await self._refresh.run()
        except RequestCancelled:
            raise ApiClientError.timeout_error()
        except ApiClientError as e:
            logger.warning(f"Session refresh failed ({e.message}), clearing credentials")
            self.storage.clear_tokens()
            raise ApiClientError.session_expired() from e

    async def _attempt(
        self,
        method: str,
        url: str,
        headers: httpx.Headers,
        body: Any,
        timeout_ms: int,
        cancel_event: Optional[asyncio.Event],
    ) -> httpx.Response:
        content = None
        if body is not None and method != "GET":
            content = json.dumps(body)

        logger.debug(f"{method} {url}")
        try:
            request = self._http.build_request(method, url, headers=headers, content=content)
            if cancel_event is not None:
                return await wait_or_cancel(self._http.send(request), cancel_event)
            return await asyncio.wait_for(self._http.send(request), timeout=timeout_ms / 1000)
        except (asyncio.TimeoutError, RequestCancelled, httpx.TimeoutException):
            logger.warning(f"{method} {url} timed out or was cancelled")
            raise ApiClientError.timeout_error()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"{method} {url} failed: {e}")
            raise ApiClientError.network_error() from e

    async def request(
        self,
        path: str,
        method: str = "GET",
        headers: Optional[Mapping[str, str]] = None,
        body: Any = None,
        params: Optional[Mapping[str, Any]] = None,
        timeout_ms: Optional[int] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> ApiResponse:
        """Make an API request

        Args:
            path: Path relative to the versioned prefix, e.g. "/events"
            method: HTTP method
            headers: Extra headers; these win over defaults and Authorization
            body: JSON-serializable body (ignored for GET)
            params: Query parameters; None and "" values are dropped
            timeout_ms: Deadline override; unused when cancel_event is given
            cancel_event: Caller-owned cancellation; replaces the internal deadline

        Returns:
            The parsed success envelope

        Raises:
            ApiClientError: for every failure
        """
        method = method.upper()
        timeout_ms = timeout_ms if timeout_ms is not None else self.timeout_ms
        try:
            url = build_url(self.base_url, f"{API_PREFIX}{path}", params)
        except httpx.InvalidURL as e:
            logger.error(f"Cannot build a request URL from base {self.base_url!r}: {e}")
            raise ApiClientError.network_error() from e
        request_headers = self._merge_headers(headers)

        response = await self._attempt(method, url, request_headers, body, timeout_ms, cancel_event)

        if response.status_code == 401 and self._should_refresh(path):
            response = await self._refresh_and_retry(
                method, url, request_headers, body, timeout_ms, cancel_event
            )

        return parse_response(response)

    def _should_refresh(self, path: str) -> bool:
        return bool(self.storage.get_refresh_token()) and not is_auth_path(path, AUTH_PATH_PREFIX)

    async def _refresh_and_retry(
        self,
        method: str,
        url: str,
        headers: httpx.Headers,
        body: Any,
        timeout_ms: int,
        cancel_event: Optional[asyncio.Event],
    ) -> httpx.Response:
        logger.debug(f"{method} {url} returned 401, refreshing session")
        await self.refresh_session(cancel_event)

        retry_headers = httpx.Headers(headers)
        retry_headers.pop("Authorization", None)
        retry_headers.update(self._auth_headers())

        logger.debug(f"Retrying {method} {url} with refreshed token")
        return await self._attempt(method, url, retry_headers, body, timeout_ms, cancel_event)

    # Convenience methods

    async def get(self, path: str, **options) -> ApiResponse:
        return await self.request(path, method="GET", **options)

    async def post(self, path: str, body: Any = None, **options) -> ApiResponse:
        return await self.request(path, method="POST", body=body, **options)

    async def put(self, path: str, body: Any = None, **options) -> ApiResponse:
        return await self.request(path, method="PUT", body=body, **options)

    async def patch(self, path: str, body: Any = None, **options) -> ApiResponse:
        return await self.request(path, method="PATCH", body=body, **options)

    async def delete(self, path: str, **options) -> ApiResponse:
        return await self.request(path, method="DELETE", **options)

