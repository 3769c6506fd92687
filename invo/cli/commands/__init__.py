"""CLI command modules."""

from __future__ import annotations

import typer
from rich.console import Console

from invo.client import InvoClient
from invo.exceptions import AuthError, ConfigurationError

_console = Console()


def get_authenticated_client() -> InvoClient:
    """Build an InvoClient from INVO_* environment variables, or exit with an error message.

    Password sessions are logged in immediately; API-key sessions log in on
    their first request.
    """
    try:
        client = InvoClient()
    except ConfigurationError as e:
        _console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    if client.session.config.is_password_flow:
        try:
            client.login()
        except AuthError as e:
            client.close()
            fail(e)
    return client


def fail(error: AuthError) -> None:
    """Print an SDK error and exit with status 1."""
    _console.print(f"[red]Error: {error}[/red]")
    raise typer.Exit(1)
