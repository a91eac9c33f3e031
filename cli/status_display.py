"""Status and error display for CLI"""

from rich.markup import escape
from rich.table import Table

from api_client import ApiClientError
from utils.storage import CredentialStore


def show_token_status(storage: CredentialStore, console):
    """
    Display credential status without revealing token values

    Args:
        storage: Credential store
        console: Rich console for output
    """
    status = storage.get_status()

    table = Table(title="Session Status")
    table.add_column("Property", style="cyan")
    table.add_column("Value")

    table.add_row("Logged In", "[green]Yes[/green]" if status["has_tokens"] else "[red]No[/red]")
    table.add_row("Access Token", "present" if status["has_access_token"] else "absent")
    table.add_row("Refresh Token", "present" if status["has_refresh_token"] else "absent")
    table.add_row("Storage Backend", status["backend"])
    if "token_file" in status:
        table.add_row("Token File", status["token_file"])

    console.print(table)


def print_api_error(error: ApiClientError, console):
    """
    Print an API error with per-field validation details when present

    Args:
        error: The failed call
        console: Rich console for output
    """
    console.print(f"[red]ERROR[/red] {escape(f'[{error.code}]')}: {escape(error.message)}", highlight=False)

    if error.details:
        table = Table(title="Validation Errors")
        table.add_column("Field", style="cyan")
        table.add_column("Problems")
        for field, messages in error.details.items():
            table.add_row(field, "\n".join(messages))
        console.print(table)
