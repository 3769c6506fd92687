"""Main entry point for the INVO CLI."""

from __future__ import annotations

try:
    import typer
except ImportError:
    import sys

    print("INVO CLI requires extras: pip install invo-sdk[cli]")
    sys.exit(1)

from .commands import auth, invoices

app = typer.Typer(
    name="invo",
    help="INVO CLI - Submit invoices, read invoice files and render PDFs",
    no_args_is_help=True,
)

app.add_typer(auth.app, name="auth")
app.add_typer(invoices.app, name="invoices")


def _version_callback(value: bool) -> None:
    """Handle --version and exit early."""
    if value:
        from invo import __version__

        typer.echo(f"invo {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        help="Show the CLI version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """INVO CLI root callback."""
    _ = version


@app.command()
def version() -> None:
    """Show the CLI version."""
    from invo import __version__

    typer.echo(f"invo {__version__}")


if __name__ == "__main__":
    app()
