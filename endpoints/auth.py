"""Authentication and user profile endpoints"""

import logging
from typing import Any, Dict, Optional

from api_client import ApiClient, ApiResponse, TokenPair

logger = logging.getLogger(__name__)


def _store_tokens(client: ApiClient, response: ApiResponse) -> bool:
    """Persist the credential pair carried by a login/register response"""
    if not response.success:
        return False
    try:
        tokens = TokenPair.from_payload({"data": response.data})
    except ValueError:
        return False
    client.storage.set_tokens(tokens.access_token, tokens.refresh_token)
    return True


async def login(
    client: ApiClient,
    email: str,
    password: str,
    remember_me: Optional[bool] = None,
) -> ApiResponse:
    """Log in and store the returned credential pair

    Args:
        client: API client
        email: Account email
        password: Account password
        remember_me: Ask the backend for a long-lived session

    Returns:
        Envelope whose data holds the user and tokens
    """
    payload: Dict[str, Any] = {"email": email, "password": password}
    if remember_me is not None:
        payload["rememberMe"] = remember_me

    response = await client.post("/auth/login", payload)
    if _store_tokens(client, response):
        logger.info("Logged in, credential pair stored")
    else:
        logger.warning("Login response did not contain a token pair")
    return response


async def register(client: ApiClient, data: Dict[str, Any]) -> ApiResponse:
    """Register a new account

    The backend normally answers with the user and a verification message;
    if it also issues tokens they are stored.
    """
    response = await client.post("/auth/register", data)
    if _store_tokens(client, response):
        logger.info("Registered, credential pair stored")
    return response


async def logout(client: ApiClient) -> None:
    """Log out on the server and always clear local credentials"""
    try:
        await client.post("/auth/logout")
    finally:
        client.storage.clear_tokens()
        logger.info("Logged out, credentials cleared")


async def forgot_password(client: ApiClient, email: str) -> ApiResponse:
    return await client.post("/auth/forgot-password", {"email": email})


async def reset_password(client: ApiClient, token: str, password: str, confirm_password: str) -> ApiResponse:
    return await client.post(
        "/auth/reset-password",
        {"token": token, "password": password, "confirmPassword": confirm_password},
    )


async def get_current_user(client: ApiClient) -> ApiResponse:
    return await client.get("/users/me")


async def update_profile(client: ApiClient, data: Dict[str, Any]) -> ApiResponse:
    return await client.patch("/users/me", data)


async def refresh_tokens(client: ApiClient) -> TokenPair:
    """Rotate the credential pair now, sharing any refresh already in flight

    Returns:
        The newly stored pair

    Raises:
        ApiClientError: UNAUTHORIZED if there is no session to refresh
    """
    await client.refresh_session()
    return TokenPair(
        access_token=client.storage.get_access_token(),
        refresh_token=client.storage.get_refresh_token(),
    )


async def verify_email(client: ApiClient, token: str) -> ApiResponse:
    return await client.post("/auth/verify-email", {"token": token})


async def resend_verification_email(client: ApiClient) -> ApiResponse:
    return await client.post("/auth/resend-verification")


async def change_password(client: ApiClient, current_password: str, new_password: str) -> ApiResponse:
    """Change the password of the logged-in user"""
    return await client.post(
        "/auth/change-password",
        {"currentPassword": current_password, "newPassword": new_password},
    )
