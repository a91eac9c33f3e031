"""Session token refresh against the backend's refresh endpoint"""

import asyncio
import logging
from typing import Dict

import httpx

from headers import API_PREFIX, REFRESH_PATH
from utils.storage import CredentialStore
from .errors import ApiClientError
from .models import TokenPair
from .url_builder import build_url

logger = logging.getLogger(__name__)


async def refresh_session_tokens(
    http: httpx.AsyncClient,
    base_url: str,
    default_headers: Dict[str, str],
    storage: CredentialStore,
    timeout_ms: int,
) -> TokenPair:
    """Exchange the stored refresh token for a new credential pair

    This call goes straight to the transport rather than through
    ``ApiClient.request`` so a 401 here can never trigger another refresh.
    Only the default headers are sent, never an Authorization header.

    Args:
        http: Shared HTTP client
        base_url: Backend origin
        default_headers: Default JSON headers of the dispatcher
        storage: Credential store to read from and rotate
        timeout_ms: Deadline for the refresh call

    Returns:
        The new token pair, already written to ``storage``

    Raises:
        ApiClientError: UNAUTHORIZED when no refresh token is stored or the
            refresh is rejected or fails
    """
    refresh_token = storage.get_refresh_token()
    if not refresh_token:
        logger.warning("No refresh token available for refresh")
        raise ApiClientError.no_refresh_token()

    logger.info("Attempting to refresh session tokens...")
    try:
        response = await asyncio.wait_for(
            http.post(
                build_url(base_url, f"{API_PREFIX}{REFRESH_PATH}"),
                json={"refreshToken": refresh_token},
                headers=default_headers,
            ),
            timeout=timeout_ms / 1000,
        )
    except asyncio.TimeoutError as e:
        logger.error(f"Token refresh timed out after {timeout_ms}ms")
        raise ApiClientError.session_expired() from e
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logger.error(f"Token refresh request failed: {e}")
        raise ApiClientError.session_expired() from e

    if not response.is_success:
        logger.error(f"Token refresh failed with status {response.status_code}")
        storage.clear_tokens()
        raise ApiClientError.session_expired()

    try:
        tokens = TokenPair.from_payload(response.json())
    except ValueError as e:
        logger.error(f"Failed to parse token refresh response: {e}")
        raise ApiClientError.session_expired() from e

    storage.set_tokens(tokens.access_token, tokens.refresh_token)
    logger.info("Successfully refreshed session tokens")
    return tokens
