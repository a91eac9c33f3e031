"""CLI entry point and argument parsing"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

import settings
from api_client import ApiClient, ApiClientError
from cli.auth_handlers import COMMANDS
from cli.status_display import print_api_error
from utils.debug_console import create_debug_console, setup_debug_logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="lux", description="Lux event platform API client")
    parser.add_argument("--debug", "-d", action="store_true", help="Write verbose logs to the debug log file")
    parser.add_argument("--api-url", default=None, help="Override backend URL (default: from config)")

    subparsers = parser.add_subparsers(dest="command", required=True)

    login = subparsers.add_parser("login", help="Log in and store session tokens")
    login.add_argument("--email", "-e", default=None)
    login.add_argument("--password", "-p", default=None, help="Prompted for when omitted")
    login.add_argument("--remember-me", action="store_true")

    subparsers.add_parser("logout", help="Log out and clear stored tokens")
    subparsers.add_parser("status", help="Show stored session status")
    subparsers.add_parser("refresh", help="Rotate the stored session tokens")

    request = subparsers.add_parser("request", help="Send an authenticated request")
    request.add_argument("method", type=str.upper, choices=["GET", "POST", "PUT", "PATCH", "DELETE"])
    request.add_argument("path", help="Path below /api/v1, e.g. /events")
    request.add_argument("--param", "-q", action="append", metavar="KEY=VALUE", help="Query parameter (repeatable)")
    request.add_argument("--data", default=None, help="JSON request body")

    return parser


def configure_logging(debug: bool):
    """Set the root level from LOG_LEVEL, with a debug log file in debug mode"""
    level = getattr(logging, str(settings.LOG_LEVEL).upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    if debug:
        debug_logger = setup_debug_logger(settings.DEBUG_LOG_FILE)
        debug_logger.debug("[CLI] ===== CLI SESSION STARTED =====")
        return create_debug_console(debug_enabled=True, debug_logger=debug_logger)
    return create_debug_console()


async def run_command(args, console) -> int:
    handler = COMMANDS[args.command]
    async with ApiClient(base_url=args.api_url) as client:
        return await handler(client, args, console)


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the CLI"""
    args = build_parser().parse_args(argv)
    console = configure_logging(args.debug)

    if args.debug:
        console.print(f"[yellow]Debug mode enabled - verbose logging will be written to {settings.DEBUG_LOG_FILE}[/yellow]")

    try:
        exit_code = asyncio.run(run_command(args, console))
    except ApiClientError as e:
        print_api_error(e, console)
        exit_code = 1
    except KeyboardInterrupt:
        console.print("\n[yellow]Cancelled by user[/yellow]")
        exit_code = 130

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
