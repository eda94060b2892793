"""Marketflow CLI - Main entry point."""

from __future__ import annotations

import sys
from typing import Annotated

import typer

from marketflow import __version__

from .helpers import console

app = typer.Typer(
    name="marketflow",
    help="Build, store and lay out marketing automation workflows.",
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"[bold cyan]marketflow[/bold cyan] version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log at the configured level instead of WARNING."),
    ] = False,
):
    """Marketflow - visual workflow builder for marketing automation.

    [bold]Quick Start:[/bold]

        marketflow palette                 Show the node palette
        marketflow workflows list          List stored workflows
        marketflow workflows import FILE   Import a workflow from JSON/YAML
        marketflow marketing run           Run the simulated agent pipeline
        marketflow serve                   Start the HTTP API
    """
    from marketflow.config import configure_logging, get_settings

    settings = get_settings()
    configure_logging(
        level=settings.log_level if verbose else "WARNING",
        format=settings.log_format,
        sanitize_logs=settings.sanitize_logs,
        stream=sys.stderr,
    )


# =============================================================================
# Register sub-app commands
# =============================================================================

from .commands.marketing import marketing_app  # noqa: E402
from .commands.workflows import workflows_app  # noqa: E402

app.add_typer(workflows_app, name="workflows")
app.add_typer(marketing_app, name="marketing")


# =============================================================================
# Register top-level commands
# =============================================================================

from .commands.setup import dashboard, palette, serve, version_cmd  # noqa: E402

app.command("version")(version_cmd)
app.command()(palette)
app.command()(serve)
app.command()(dashboard)


if __name__ == "__main__":
    app()
