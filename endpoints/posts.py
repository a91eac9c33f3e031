"""Event post (announcement) endpoints"""

from typing import Any, Dict, Optional

from api_client import ApiClient, ApiResponse


async def get_event_posts(client: ApiClient, event_id: str, filters: Optional[Dict[str, Any]] = None) -> ApiResponse:
    return await client.get(f"/events/{event_id}/posts", params=filters)


async def get_post(client: ApiClient, post_id: str) -> ApiResponse:
    return await client.get(f"/posts/{post_id}")


async def create_post(client: ApiClient, event_id: str, data: Dict[str, Any]) -> ApiResponse:
    return await client.post(f"/events/{event_id}/posts", data)


async def update_post(client: ApiClient, post_id: str, data: Dict[str, Any]) -> ApiResponse:
    return await client.put(f"/posts/{post_id}", data)


async def delete_post(client: ApiClient, post_id: str) -> ApiResponse:
    return await client.delete(f"/posts/{post_id}")


async def pin_post(client: ApiClient, post_id: str) -> ApiResponse:
    return await client.post(f"/posts/{post_id}/pin")


async def unpin_post(client: ApiClient, post_id: str) -> ApiResponse:
    return await client.delete(f"/posts/{post_id}/pin")
