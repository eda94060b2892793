"""Marketing commands - inspect and run the simulated agent pipeline."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import typer
from pydantic import ValidationError as PydanticValidationError
from rich.table import Table

from marketflow.agents import (
    MARKETING_AGENTS,
    AgentResult,
    MarketingPipeline,
    MarketingWorkflowRunner,
    SimulatedAgentExecutor,
)
from marketflow.errors import ValidationError

from ..helpers import console, load_document

marketing_app = typer.Typer(help="Simulated multi-agent marketing pipeline")


@marketing_app.command("agents")
def list_agents():
    """List the marketing agents in pipeline order."""
    table = Table(title="Marketing Agents")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Type", style="cyan")
    table.add_column("Agent")
    table.add_column("Description")
    for index, agent in enumerate(MARKETING_AGENTS, start=1):
        table.add_row(str(index), agent.type, f"{agent.emoji} {agent.label}", agent.description)
    console.print(table)


@marketing_app.command("run")
def run_pipeline(
    config: Path | None = typer.Option(
        None, "--config", "-c", help="JSON/YAML file with 'configs' and 'connections'"
    ),
    inactive: list[str] | None = typer.Option(
        None, "--inactive", "-x", help="Agent type to deactivate (repeatable)"
    ),
    cut: list[int] | None = typer.Option(
        None, "--cut", help="Disable the connection leaving agent N (1-5, repeatable)"
    ),
    delay: float | None = typer.Option(
        None, "--delay", "-d", help="Seconds per simulated step (default: settings)"
    ),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
):
    """Run the marketing pipeline with simulated agents."""
    from marketflow.config import get_settings

    document = load_document(config) if config else {}
    if not isinstance(document, dict):
        console.print("[red]Config file must contain an object[/red]")
        raise typer.Exit(1)

    try:
        pipeline = MarketingPipeline(
            configs=document.get("configs"),
            connections=document.get("connections"),
        )
        for agent_type in inactive or []:
            pipeline.set_active(agent_type, False)
        for index in cut or []:
            pipeline.set_connection(index - 1, False)
    except ValidationError as e:
        console.print(f"[red]Invalid pipeline:[/red] {e.message}")
        raise typer.Exit(1)
    except PydanticValidationError as e:
        console.print(f"[red]Invalid agent config:[/red] {e.errors()[0]['msg']}")
        raise typer.Exit(1)

    step_delay = get_settings().simulated_step_delay_seconds if delay is None else delay
    runner = MarketingWorkflowRunner(
        pipeline,
        SimulatedAgentExecutor(delay=step_delay),
        step_callback=None if json_output else _print_step,
    )
    results = asyncio.run(runner.run())

    if json_output:
        out = {
            "executionPath": pipeline.execution_path(),
            "complete": runner.complete,
            "results": {t: r.to_dict() for t, r in results.items()},
        }
        print(json.dumps(out, indent=2))
        return

    if not results:
        console.print("[yellow]No active agents - nothing to run[/yellow]")
        return
    console.print(f"\n[bold green]Workflow complete[/bold green] ({len(results)} step(s))")


def _print_step(agent_type: str, result: AgentResult | None) -> None:
    if result is None:
        console.print(f"[cyan]▶[/cyan] Running [bold]{agent_type}[/bold]...")
    elif result.success:
        console.print(f"  [green]✓[/green] {result.output}")
    else:
        console.print(f"  [red]✗[/red] {result.error}")
