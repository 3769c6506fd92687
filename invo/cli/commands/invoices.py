"""Invoice commands for the INVO CLI."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import typer
from rich.console import Console

from invo.cli.commands import fail, get_authenticated_client
from invo.exceptions import AuthError

app = typer.Typer(help="Create, read and render invoices")
console = Console()


def _load_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text())
    except (OSError, json.JSONDecodeError) as e:
        console.print(f"[red]Could not read {path}: {e}[/red]")
        raise typer.Exit(1)
    if not isinstance(data, dict):
        console.print(f"[red]{path} must contain a JSON object[/red]")
        raise typer.Exit(1)
    return data


@app.command()
def create(
    payload: Path = typer.Argument(help="JSON file with the invoice payload"),
    callback: str = typer.Option(None, help="Webhook URL for status updates"),
) -> None:
    """Create and submit an invoice."""
    data = _load_json(payload)
    client = get_authenticated_client()

    try:
        try:
            result = client.invoices.create(data, callback=callback)
        except AuthError as e:
            fail(e)

        if result.success:
            console.print("[green]Invoice created![/green]")
        else:
            console.print("[yellow]Invoice submitted but not confirmed.[/yellow]")
        console.print(f"  Invoice ID: {result.invoice_id}")
        if result.chain_index is not None:
            console.print(f"  Chain index: {result.chain_index}")
    finally:
        client.close()


@app.command()
def read(
    file: Path = typer.Argument(help="Invoice file (PDF, XML or image)"),
) -> None:
    """Extract invoice data from a file."""
    if not file.is_file():
        console.print(f"[red]File not found: {file}[/red]")
        raise typer.Exit(1)
    client = get_authenticated_client()

    try:
        try:
            data = client.invoices.read(file)
        except AuthError as e:
            fail(e)
        console.print_json(json.dumps(data))
    finally:
        client.close()


@app.command()
def pdf(
    payload: Path = typer.Argument(help="JSON file with the invoice makeup"),
    output: Path = typer.Option(Path("invoice.pdf"), "--output", "-o", help="Where to write the PDF"),
) -> None:
    """Render an invoice PDF."""
    data = _load_json(payload)
    client = get_authenticated_client()

    try:
        try:
            content = client.invoices.pdf(data)
        except AuthError as e:
            fail(e)
        output.write_bytes(content)
        console.print(f"[green]PDF saved to {output}[/green] ({len(content)} bytes)")
    finally:
        client.close()
