"""Event endpoints

Filters are passed through as query parameters using the backend's names
(``page``, ``limit``, ``sortBy``, ``status``, ``startFrom`` ...).
"""

from typing import Any, Dict, Optional

from api_client import ApiClient, ApiResponse


async def get_events(client: ApiClient, filters: Optional[Dict[str, Any]] = None) -> ApiResponse:
    """Paginated list of events"""
    return await client.get("/events", params=filters)


async def get_event(client: ApiClient, event_id: str) -> ApiResponse:
    return await client.get(f"/events/{event_id}")


async def create_event(client: ApiClient, data: Dict[str, Any]) -> ApiResponse:
    return await client.post("/events", data)


async def update_event(client: ApiClient, event_id: str, data: Dict[str, Any]) -> ApiResponse:
    return await client.patch(f"/events/{event_id}", data)


async def delete_event(client: ApiClient, event_id: str) -> ApiResponse:
    return await client.delete(f"/events/{event_id}")


async def get_my_events(client: ApiClient, filters: Optional[Dict[str, Any]] = None) -> ApiResponse:
    """Events hosted by the current user"""
    return await client.get("/events/my", params=filters)


async def get_attending_events(client: ApiClient, filters: Optional[Dict[str, Any]] = None) -> ApiResponse:
    """Events the current user is attending"""
    return await client.get("/events/attending", params=filters)


async def publish_event(client: ApiClient, event_id: str) -> ApiResponse:
    """Publish a draft event"""
    return await client.post(f"/events/{event_id}/publish")


async def cancel_event(client: ApiClient, event_id: str, reason: Optional[str] = None) -> ApiResponse:
    return await client.post(f"/events/{event_id}/cancel", {"reason": reason})


async def get_event_attendees(
    client: ApiClient,
    event_id: str,
    page: Optional[int] = None,
    limit: Optional[int] = None,
    status: Optional[str] = None,
) -> ApiResponse:
    return await client.get(
        f"/events/{event_id}/attendees",
        params={"page": page, "limit": limit, "status": status},
    )


async def register_for_event(client: ApiClient, event_id: str) -> ApiResponse:
    return await client.post(f"/events/{event_id}/register")


async def unregister_from_event(client: ApiClient, event_id: str) -> ApiResponse:
    return await client.delete(f"/events/{event_id}/register")


async def check_in_attendee(client: ApiClient, event_id: str, attendee_id: str) -> ApiResponse:
    return await client.post(f"/events/{event_id}/attendees/{attendee_id}/check-in")


async def get_upcoming_events(client: ApiClient, limit: Optional[int] = None) -> ApiResponse:
    """Public list of upcoming events"""
    return await client.get("/events/upcoming", params={"limit": limit})


async def search_events(
    client: ApiClient,
    query: str,
    filters: Optional[Dict[str, Any]] = None,
) -> ApiResponse:
    params: Dict[str, Any] = {"q": query}
    if filters:
        params.update(filters)
    return await client.get("/events/search", params=params)
