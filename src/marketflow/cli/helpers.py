"""Shared helpers for CLI modules."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import typer
import yaml
from rich.console import Console

from marketflow.errors import MarketflowError
from marketflow.workflows import WorkflowManager

console = Console()


def get_workflow_manager() -> WorkflowManager:
    """Workflow repository on the configured database."""
    try:
        return WorkflowManager()
    except MarketflowError as e:
        console.print(f"[red]Database error:[/red] {e.message}")
        raise typer.Exit(1)
    except ValueError as e:
        console.print(f"[red]Invalid database configuration:[/red] {e}")
        raise typer.Exit(1)


def load_document(file_path: Path) -> Any:
    """Load a JSON or YAML file, chosen by suffix.

    Raises:
        typer.Exit: If the file is missing or cannot be parsed.
    """
    if not file_path.exists():
        console.print(f"[red]File not found:[/red] {file_path}")
        raise typer.Exit(1)

    content = file_path.read_text()
    if file_path.suffix in (".yaml", ".yml"):
        try:
            return yaml.safe_load(content)
        except yaml.YAMLError as e:
            console.print(f"[red]Error parsing YAML:[/red] {e}")
            raise typer.Exit(1)
    try:
        return json.loads(content)
    except json.JSONDecodeError as e:
        console.print(f"[red]Error parsing JSON:[/red] {e}")
        raise typer.Exit(1)


def dump_document(data: Any, file_path: Path) -> None:
    """Write ``data`` as YAML or JSON, chosen by suffix."""
    file_path.parent.mkdir(parents=True, exist_ok=True)
    if file_path.suffix in (".yaml", ".yml"):
        file_path.write_text(yaml.safe_dump(data, sort_keys=False, allow_unicode=True))
    else:
        file_path.write_text(json.dumps(data, indent=2, default=str))
