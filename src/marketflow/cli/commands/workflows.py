"""Workflow commands - list, show, export, import, delete, layout."""

from __future__ import annotations

import json
from pathlib import Path

import typer
from pydantic import ValidationError as PydanticValidationError
from rich.panel import Panel
from rich.table import Table

from marketflow.errors import ValidationError
from marketflow.graph import WorkflowStore
from marketflow.utils import safe_file_stem
from marketflow.workflows import WorkflowCreate, load_into_store, save_store

from ..helpers import console, dump_document, get_workflow_manager, load_document

workflows_app = typer.Typer(help="Manage stored workflows")


def _require(manager, workflow_id: int):
    record = manager.get_workflow(workflow_id)
    if record is None:
        console.print(f"[red]Workflow not found:[/red] {workflow_id}")
        raise typer.Exit(1)
    return record


@workflows_app.command("list")
def list_workflows(
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
):
    """List stored workflows."""
    summaries = get_workflow_manager().list_summaries()

    if json_output:
        print(json.dumps([s.model_dump(mode="json") for s in summaries], indent=2))
        return

    if not summaries:
        console.print("[yellow]No workflows stored[/yellow]")
        return

    table = Table(title="Workflows")
    table.add_column("ID", justify="right", style="cyan")
    table.add_column("Name")
    table.add_column("Nodes", justify="right")
    table.add_column("Edges", justify="right")
    table.add_column("Updated", style="dim")
    for s in summaries:
        table.add_row(
            str(s.id),
            s.name,
            str(s.node_count),
            str(s.edge_count),
            s.updated_at.strftime("%Y-%m-%d %H:%M"),
        )
    console.print(table)


@workflows_app.command("show")
def show_workflow(
    workflow_id: int = typer.Argument(..., help="Workflow ID"),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
):
    """Show one workflow and its nodes."""
    record = _require(get_workflow_manager(), workflow_id)

    if json_output:
        print(json.dumps(record.model_dump(mode="json"), indent=2))
        return

    graph = record.graph()
    console.print(
        Panel(
            f"[bold]{record.name}[/bold]\n"
            f"{record.description or '[dim]No description[/dim]'}\n\n"
            f"Nodes: {len(graph.nodes)}  Edges: {len(graph.edges)}",
            title=f"Workflow {record.id}",
            border_style="blue",
        )
    )

    if graph.nodes:
        table = Table(title="Nodes")
        table.add_column("ID", style="cyan")
        table.add_column("Type")
        table.add_column("Label")
        table.add_column("Position", justify="right")
        for node in graph.nodes:
            table.add_row(
                node.id,
                node.type,
                str(node.data.get("label", "")),
                f"({node.position.x:g}, {node.position.y:g})",
            )
        console.print(table)


@workflows_app.command("export")
def export_workflow(
    workflow_id: int = typer.Argument(..., help="Workflow ID"),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Output file (.json/.yaml); default: WORKFLOWS_DIR/<name>.json"
    ),
):
    """Export a workflow to a JSON or YAML file."""
    from marketflow.config import get_settings

    record = _require(get_workflow_manager(), workflow_id)
    if output is None:
        output = get_settings().workflows_dir / f"{safe_file_stem(record.name)}.json"

    dump_document(
        {
            "name": record.name,
            "description": record.description,
            "data": record.data,
        },
        output,
    )
    console.print(f"[green]Exported workflow {record.id} to[/green] {output}")


@workflows_app.command("import")
def import_workflow(
    file: Path = typer.Argument(..., help="Workflow file (.json/.yaml)"),
    name: str | None = typer.Option(None, "--name", "-n", help="Override the workflow name"),
):
    """Import a workflow from a JSON or YAML file.

    The file holds either an exported workflow (name, description, data) or a
    bare graph with nodes and edges.
    """
    document = load_document(file)
    if not isinstance(document, dict):
        console.print("[red]Workflow file must contain an object[/red]")
        raise typer.Exit(1)

    if "data" in document:
        data = document["data"]
        description = document.get("description")
        default_name = document.get("name")
    else:
        data = {"nodes": document.get("nodes", []), "edges": document.get("edges", [])}
        description = None
        default_name = None

    try:
        workflow = WorkflowCreate(
            name=name or default_name or file.stem,
            description=description,
            data=data,
        )
        record = get_workflow_manager().create_workflow(workflow)
    except ValidationError as e:
        console.print(f"[red]Invalid workflow:[/red] {e.message}")
        for problem in e.errors:
            console.print(f"  - {problem}")
        raise typer.Exit(1)
    except PydanticValidationError as e:
        console.print(f"[red]Invalid workflow:[/red] {e.errors()[0]['msg']}")
        raise typer.Exit(1)

    console.print(f"[green]Imported workflow[/green] {record.id}: {record.name}")


@workflows_app.command("delete")
def delete_workflow(
    workflow_id: int = typer.Argument(..., help="Workflow ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """Delete a workflow."""
    manager = get_workflow_manager()
    record = _require(manager, workflow_id)

    if not yes and not typer.confirm(f"Delete workflow '{record.name}'?"):
        console.print("[yellow]Cancelled[/yellow]")
        raise typer.Exit(0)

    manager.delete_workflow(workflow_id)
    console.print(f"[green]Deleted workflow[/green] {workflow_id}")


@workflows_app.command("layout")
def layout_workflow(
    workflow_id: int = typer.Argument(..., help="Workflow ID"),
):
    """Auto-layout a stored workflow by node type and save it."""
    manager = get_workflow_manager()
    _require(manager, workflow_id)

    store = WorkflowStore()
    load_into_store(manager, store, workflow_id)
    store.auto_layout()
    save_store(manager, store)
    console.print(f"[green]Laid out {len(store.nodes)} node(s) in workflow[/green] {workflow_id}")
