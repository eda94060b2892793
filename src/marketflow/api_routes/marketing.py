"""Simulated marketing pipeline endpoints."""

import logging

from fastapi import APIRouter, Request
from pydantic import BaseModel, Field

from marketflow import api_state as state
from marketflow.agents import (
    MARKETING_AGENTS,
    AgentConfig,
    MarketingPipeline,
    MarketingWorkflowRunner,
    SimulatedAgentExecutor,
)
from marketflow.api_errors import RUN_RESPONSES, conflict
from marketflow.config import get_settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/marketing")


class MarketingRunRequest(BaseModel):
    """Request to run the marketing pipeline."""

    configs: dict[str, AgentConfig] = Field(
        default_factory=dict, description="Per-agent config overrides keyed by agent type"
    )
    connections: list[bool] | None = Field(
        None, description="Five toggles for the links between consecutive agents"
    )


def _run_limit() -> str:
    return get_settings().marketing_run_rate_limit


@router.get("/agents")
def list_agents() -> dict:
    """The six marketing agents with their default configuration."""
    return {"agents": [agent.to_dict() for agent in MARKETING_AGENTS]}


@router.post("/run", responses=RUN_RESPONSES)
@state.limiter.limit(_run_limit)
async def run_marketing_workflow(request: Request, body: MarketingRunRequest) -> dict:
    """Run the pipeline to completion and return every step's result."""
    if state.marketing_runner is not None and state.marketing_runner.is_running:
        raise conflict("A marketing run is already in progress")

    pipeline = MarketingPipeline(configs=body.configs, connections=body.connections)
    executor = SimulatedAgentExecutor(delay=get_settings().simulated_step_delay_seconds)
    runner = MarketingWorkflowRunner(pipeline, executor)
    state.marketing_runner = runner

    results = await runner.run()
    return {
        "executionPath": pipeline.execution_path(),
        "complete": runner.complete,
        "results": {agent_type: r.to_dict() for agent_type, r in results.items()},
    }
