"""Authentication commands for the INVO CLI."""

from __future__ import annotations

import typer
from rich.console import Console

from invo.auth.token import seconds_until_expiry
from invo.cli.commands import fail, get_authenticated_client
from invo.exceptions import AuthError

app = typer.Typer(help="Check authentication")
console = Console()


@app.command()
def status() -> None:
    """Authenticate with the configured credentials and show the session."""
    client = get_authenticated_client()

    try:
        try:
            client.session.ensure_authenticated()
        except AuthError as e:
            fail(e)

        user = client.user
        console.print("[green]Authenticated[/green]")
        console.print(f"  Environment: {client.environment}")
        if user is not None:
            console.print(f"  User ID: {user.id}")
            console.print(f"  Email: {user.email}")
        if client.session.config.workspace_id:
            console.print(f"  Workspace: {client.session.config.workspace_id}")
        token = client.session.access_token
        if token:
            console.print(f"  Token expires in: {seconds_until_expiry(token)}s")
    finally:
        client.close()
