"""Command handlers for CLI"""

import json
from typing import Any, Dict, List, Optional

from rich.prompt import Prompt

import endpoints
from api_client import ApiClient
from cli.status_display import show_token_status


async def handle_login(client: ApiClient, args, console) -> int:
    """Prompt for anything missing, log in, and store the credential pair"""
    email = args.email or Prompt.ask("Email", console=console)
    password = args.password or Prompt.ask("Password", password=True, console=console)

    response = await endpoints.login(client, email, password, remember_me=args.remember_me or None)

    name = email
    user = response.data.get("user") if isinstance(response.data, dict) else None
    if isinstance(user, dict):
        name = user.get("name") or user.get("email") or email
    console.print(f"[green][OK][/green] Logged in as {name}")
    return 0


async def handle_logout(client: ApiClient, args, console) -> int:
    """Log out; local credentials are cleared even if the server call fails"""
    if not client.storage.has_tokens():
        console.print("[yellow]Not logged in[/yellow]")
        return 0

    await endpoints.logout(client)
    console.print("[green][OK][/green] Logged out")
    return 0


async def handle_status(client: ApiClient, args, console) -> int:
    show_token_status(client.storage, console)
    return 0


async def handle_refresh(client: ApiClient, args, console) -> int:
    """Rotate the stored credential pair"""
    await endpoints.refresh_tokens(client)
    console.print("[green][OK][/green] Session tokens refreshed")
    return 0


def parse_params(raw_params: Optional[List[str]]) -> Dict[str, str]:
    """Turn ``key=value`` arguments into a query parameter mapping

    Raises:
        ValueError: if an argument has no '='
    """
    params: Dict[str, str] = {}
    for item in raw_params or []:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise ValueError(f"Invalid parameter {item!r}, expected key=value")
        params[key] = value
    return params


async def handle_request(client: ApiClient, args, console) -> int:
    """Issue a raw authenticated request and print the envelope"""
    try:
        params = parse_params(args.param)
        body: Any = json.loads(args.data) if args.data else None
    except ValueError as e:
        console.print(f"[red]ERROR:[/red] {e}")
        return 2

    path = args.path if args.path.startswith("/") else f"/{args.path}"
    response = await client.request(path, method=args.method, body=body, params=params)
    console.print_json(data=response.model_dump())
    return 0


COMMANDS = {
    "login": handle_login,
    "logout": handle_logout,
    "status": handle_status,
    "refresh": handle_refresh,
    "request": handle_request,
}
