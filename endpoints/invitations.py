"""Invitation endpoints"""

from typing import Any, Dict, List, Optional

from api_client import ApiClient, ApiResponse


async def get_invitations(client: ApiClient, filters: Optional[Dict[str, Any]] = None) -> ApiResponse:
    return await client.get("/invitations", params=filters)


async def get_received_invitations(client: ApiClient, filters: Optional[Dict[str, Any]] = None) -> ApiResponse:
    """Invitations sent to the current user"""
    return await client.get("/users/me/invitations", params=filters)


async def get_sent_invitations(client: ApiClient, filters: Optional[Dict[str, Any]] = None) -> ApiResponse:
    """Invitations sent by the current user"""
    return await client.get("/users/me/invitations/sent", params=filters)


async def get_invitation(client: ApiClient, invitation_id: str) -> ApiResponse:
    return await client.get(f"/invitations/{invitation_id}")


async def create_invitation(client: ApiClient, data: Dict[str, Any]) -> ApiResponse:
    return await client.post("/invitations", data)


async def send_invitations(
    client: ApiClient,
    event_id: str,
    emails: List[str],
    message: Optional[str] = None,
) -> ApiResponse:
    """Invite several addresses to an event at once

    The envelope's data reports ``sent`` and the ``failed`` addresses.
    """
    return await client.post(
        f"/events/{event_id}/invitations",
        {"emails": emails, "message": message},
    )


async def respond_to_invitation(client: ApiClient, invitation_id: str, data: Dict[str, Any]) -> ApiResponse:
    """Accept or decline an invitation"""
    return await client.put(f"/invitations/{invitation_id}/respond", data)


async def cancel_invitation(client: ApiClient, invitation_id: str) -> ApiResponse:
    return await client.delete(f"/invitations/{invitation_id}")


async def resend_invitation(client: ApiClient, invitation_id: str) -> ApiResponse:
    return await client.post(f"/invitations/{invitation_id}/resend")


async def get_invitation_by_token(client: ApiClient, token: str) -> ApiResponse:
    """Public lookup used by email invitation links"""
    return await client.get(f"/invitations/token/{token}")


async def respond_to_invitation_by_token(client: ApiClient, token: str, data: Dict[str, Any]) -> ApiResponse:
    return await client.post(f"/invitations/token/{token}/respond", data)


async def get_pending_invitation_count(client: ApiClient) -> ApiResponse:
    return await client.get("/invitations/pending/count")
