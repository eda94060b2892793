"""Top-level commands - version, palette, serve, dashboard."""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path

import typer
from rich.table import Table

from ..helpers import console


def version_cmd() -> None:
    """Show Marketflow version."""
    from marketflow import __version__

    console.print(f"[bold cyan]marketflow[/bold cyan] version {__version__}")


def palette(
    category: str | None = typer.Option(None, "--category", "-c", help="Only show one category"),
) -> None:
    """Show the node palette."""
    from marketflow.graph.palette import CATEGORIES, definitions_by_category

    if category and category not in CATEGORIES:
        console.print(f"[red]Unknown category:[/red] {category}")
        console.print(f"Categories: {', '.join(CATEGORIES)}")
        raise typer.Exit(1)

    grouped = definitions_by_category()
    table = Table(title="Node Palette")
    table.add_column("Type", style="cyan")
    table.add_column("Label")
    table.add_column("Category")
    table.add_column("Color", style="dim")

    for name in CATEGORIES:
        if category and name != category:
            continue
        for definition in grouped.get(name, []):
            table.add_row(definition.type, definition.label, name, definition.color)

    console.print(table)


def serve(
    host: str | None = typer.Option(None, "--host", help="Bind host (default: API_HOST)"),
    port: int | None = typer.Option(None, "--port", "-p", help="Bind port (default: API_PORT)"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
) -> None:
    """Start the HTTP API server."""
    import uvicorn

    from marketflow.config import get_settings

    settings = get_settings()
    host = host or settings.api_host
    port = port or settings.api_port
    console.print(f"[cyan]Starting Marketflow API on[/cyan] http://{host}:{port}")
    uvicorn.run("marketflow.api:app", host=host, port=port, reload=reload)


def dashboard(
    port: int = typer.Option(8501, "--port", "-p", help="Port to run dashboard on"),
    host: str = typer.Option("localhost", "--host", help="Host to bind to"),
) -> None:
    """Launch the Streamlit workflow builder."""
    dashboard_path = Path(__file__).parent.parent.parent / "dashboard" / "app.py"

    if not dashboard_path.exists():
        console.print(f"[red]Dashboard not found at:[/red] {dashboard_path}")
        raise typer.Exit(1)

    console.print("[cyan]Starting Marketflow builder...[/cyan]")
    console.print(f"[bold]URL:[/bold] http://{host}:{port}")
    console.print("\n[dim]Press Ctrl+C to stop[/dim]\n")

    try:
        result = subprocess.run(
            [
                sys.executable,
                "-m",
                "streamlit",
                "run",
                str(dashboard_path),
                "--server.port",
                str(port),
                "--server.address",
                host,
                "--server.headless",
                "true",
            ],
        )
        if result.returncode != 0:
            raise typer.Exit(result.returncode)
    except KeyboardInterrupt:
        console.print("\n[yellow]Dashboard stopped[/yellow]")
